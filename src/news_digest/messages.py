from textual.message import Message


class ViewStateChanged(Message):
    """Posted whenever the view state controller changes."""
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__()
