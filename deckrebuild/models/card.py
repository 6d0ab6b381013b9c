from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CardRecord:
    """
    A card name with a quantity, as read from one deck file.

    Attributes:
        name: Normalized card name (the merge key)
        quantity: Number of copies, always positive
    """

    name: str
    quantity: int

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Card name cannot be empty")
        if self.quantity <= 0:
            raise ValueError(f"Quantity for '{self.name}' must be positive, got {self.quantity}")
