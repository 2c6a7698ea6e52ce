"""
Free-floating network annotation.
"""


class pylabel:
    """
    A text label placed on the network diagram.

    The network stores labels verbatim; they take no part in topology.
    """

    def __init__(self, dX: float = 0.0, dY: float = 0.0, dSize: float = 10.0,
                 iFlag: int = 0, sText: str = ''):
        self.dX = dX
        self.dY = dY
        self.dSize = dSize
        self.iFlag = iFlag
        self.sText = sText

    def __repr__(self):
        return f"pylabel({self.sText!r} at {self.dX}, {self.dY})"
