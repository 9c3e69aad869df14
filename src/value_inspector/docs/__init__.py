from value_inspector.docs.cache import DocCommentCache
from value_inspector.docs.parser import CommentParser, DocComment

__all__ = ["CommentParser", "DocComment", "DocCommentCache"]
