from enum import Enum, auto

# Setting the status of the vertex drag
class DragStatus(Enum):
    IDLE = auto()
    DRAGGING = auto()

# What a pointer-down on the canvas ended up doing
class PointerAction(Enum):
    NONE = auto()
    ADD = auto()
    DRAG = auto()
