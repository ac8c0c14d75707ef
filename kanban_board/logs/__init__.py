from kanban_board.logs.server_log import api_logger
from kanban_board.logs.debug_log import debug_logger, log_function
