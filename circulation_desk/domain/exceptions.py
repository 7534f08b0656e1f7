"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidConfigurationError(DomainException):
    """Fine rate or borrow period is out of range"""

    pass


class DuplicateItemError(DomainException):
    """An item with the same identifier is already in the catalog"""

    def __init__(self, item_id: str):
        super().__init__(f"Item '{item_id}' is already registered")
        self.item_id = item_id


class DuplicateMemberError(DomainException):
    """A member with the same identifier is already registered"""

    def __init__(self, member_id: str):
        super().__init__(f"Member '{member_id}' is already registered")
        self.member_id = member_id
