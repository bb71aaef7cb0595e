"""Models package."""

from .user import User
from .rating import Rating, rating_viewers
from .sharing_relationship import SharingRelationship
from .cheese import Cheese
from .gin import Gin
from .wine import Wine
from .coffee import Coffee
from .chili_sauce import ChiliSauce
