from kanban_board.db.database import atomic, get_async_session, init_db
