"""引擎异常 - 所有操作失败时抛出，且不修改游戏状态"""


class CrazyEightsError(Exception):
    """所有引擎异常的基类"""


class InvalidTurnError(CrazyEightsError):
    """不是该方的回合"""


class IllegalMoveError(CrazyEightsError):
    """出牌不合法或手中没有这张牌"""


class GameNotInProgressError(CrazyEightsError):
    """游戏不在进行中（未开始、等待指定花色或已结束）"""


class InvalidStateError(CrazyEightsError):
    """当前状态不允许该操作（如非等待时指定花色）"""


class InsufficientCardsError(CrazyEightsError):
    """牌堆不够发牌"""
