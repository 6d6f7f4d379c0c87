"""疯狂 8 点 - 人机对战纸牌游戏"""

__version__ = "0.1.0"
