from .enums import Role, Gender, Category, Difficulty, BlockColor, DIFFICULTY_ORDER
from .user import User
from .block import Block
from .completion import Completion
from .attempt import Attempt
