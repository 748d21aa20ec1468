from .post import Post, PostComment, PostLike
from .profile import Education, Experience, Profile
from .user import User

__all__ = [
    "Education",
    "Experience",
    "Post",
    "PostComment",
    "PostLike",
    "Profile",
    "User",
]
