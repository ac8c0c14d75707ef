from kanban_board.models.project import Project
from kanban_board.models.column import BoardColumn
from kanban_board.models.task import Task, Subtask
from kanban_board.models.tag import Tag
from kanban_board.models.linked_path import LinkedPath
