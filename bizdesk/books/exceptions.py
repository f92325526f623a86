"""Domain errors raised by the bookkeeping services"""


class BooksError(Exception):
    """Base class; the message is returned to the client as {"error": message}"""
    default_message = "Bookkeeping operation failed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class CategoryNotFound(BooksError):
    default_message = "Category not found"


class CategoryAlreadyExists(BooksError):
    default_message = "Category already exists"


class TransactionValidationError(BooksError):
    default_message = "Invalid transaction"
