from sprintflow.core.ports.notification_port import NotificationPort
