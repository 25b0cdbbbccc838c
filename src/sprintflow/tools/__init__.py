from sprintflow.tools.time_tools.session_player import SessionPlayer
