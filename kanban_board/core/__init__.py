from kanban_board.core.config import Settings, get_settings
