from .database import connect, get_db_path
from .persistence import Persistence
