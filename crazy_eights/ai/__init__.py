# 电脑策略模块
from .rule_ai import RuleAI, SUIT_PRIORITY
