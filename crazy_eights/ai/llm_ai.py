"""LLM AI - 基于大语言模型的电脑出牌策略"""

import asyncio
import json
import logging
import os
from typing import Iterable, List, Optional, Sequence

from openai import AsyncOpenAI

from crazy_eights.engine.card import Card, Rank, Suit, SUIT_NAME, SUIT_SYMBOL, parse_suit
from crazy_eights.engine.move import Move
from crazy_eights.engine.rules import effective_suit, is_legal_play, legal_plays
from crazy_eights.ai.rule_ai import RuleAI

logger = logging.getLogger(__name__)

# 超时上限（秒）
LLM_TIMEOUT = 10

CHARACTER_PROMPT = (
    "你是「麦当当」，一个爱玩疯狂 8 点的电脑玩家。"
    "你喜欢先把普通牌出掉，把万能的 8 留到关键时刻。"
)


# ============================================================
#  序列化辅助
# ============================================================

def _hand_str(cards: Iterable[Card]) -> str:
    """手牌列表 → 空格分隔文本"""
    return " ".join(c.display for c in cards)


def _parse_card_text(text: str) -> Optional[Card]:
    """解析 LLM 返回的单张牌文本（如 '♥8', '♠10'）"""
    text = text.strip()
    if len(text) < 2:
        return None
    symbol_map = {v: k for k, v in SUIT_SYMBOL.items()}
    suit = symbol_map.get(text[0])
    if suit is None:
        return None
    try:
        rank = Rank(text[1:].upper())
    except ValueError:
        return None
    return Card(rank=rank, suit=suit)


def _extract_json(text: str) -> Optional[dict]:
    """从 LLM 返回文本中提取 JSON 对象（兼容 markdown 代码块包裹）"""
    text = text.strip()
    if text.startswith("```"):
        lines = [l for l in text.split("\n") if not l.strip().startswith("```")]
        text = "\n".join(lines).strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        start = text.find("{")
        end = text.rfind("}")
        if start != -1 and end != -1 and end > start:
            try:
                return json.loads(text[start:end + 1])
            except json.JSONDecodeError:
                return None
    return None


# ============================================================
#  Prompt 构建
# ============================================================

def _build_play_prompt(hand: Sequence[Card], top_card: Card, declared_suit: Optional[Suit]) -> str:
    """构建出牌决策 prompt"""
    target = effective_suit(top_card, declared_suit)
    legal = legal_plays(hand, top_card, declared_suit)
    declared_text = f"（已指定花色 {SUIT_NAME[declared_suit]}）" if declared_suit else ""

    return f"""{CHARACTER_PROMPT}

你正在玩疯狂 8 点。请根据当前局面做出决策。

【当前局面】
弃牌堆顶牌: {top_card.display}{declared_text}
需要跟的花色: {SUIT_NAME[target]}
你的手牌({len(hand)}张): {_hand_str(hand)}
可出的牌: {_hand_str(legal) or "无"}

【规则约束】
出的牌必须与需要跟的花色相同，或与顶牌点数相同；8 任何时候都能出。
没有可出的牌时只能摸牌。打出 8 时需要同时指定花色。

【输出格式】严格返回 JSON，不要输出其他内容：
{{
  "action": "play" 或 "draw",
  "card": "♥8" (出的牌，draw 时为空字符串),
  "suit": "hearts" / "diamonds" / "clubs" / "spades" (仅打出 8 时需要),
  "strategy": "一句话解说你的策略（15字以内）"
}}"""


# ============================================================
#  LlmAI 类
# ============================================================

class LlmAI:
    """基于 LLM 的疯狂 8 点电脑策略。

    提供两套接口：
    - choose_move / choose_suit：同步方法，满足 AIStrategy Protocol，内部 fallback 到 RuleAI
    - async_choose_move：异步方法，供调度器 await 调用
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: str = "https://api.deepseek.com/v1",
        model: str = "deepseek-chat",
        fallback: Optional[RuleAI] = None,
    ):
        self.model = model
        self._fallback = fallback or RuleAI()
        self.last_strategy = ""

        # 若未配置 API key，仅使用 fallback
        self._enabled = bool(api_key)
        if self._enabled:
            self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        else:
            self._client = None
            logger.warning("LlmAI: 未配置 API key，将使用 RuleAI fallback")

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ----------------------------------------------------------
    #  同步接口（AIStrategy Protocol 兼容，fallback 到 RuleAI）
    # ----------------------------------------------------------

    def choose_move(
        self, hand: Sequence[Card], top_card: Card, declared_suit: Optional[Suit]
    ) -> Move:
        """同步出牌 - 直接委托 RuleAI"""
        return self._fallback.choose_move(hand, top_card, declared_suit)

    def choose_suit(self, hand: Iterable[Card]) -> Suit:
        """同步指定花色 - 直接委托 RuleAI"""
        return self._fallback.choose_suit(hand)

    # ----------------------------------------------------------
    #  LLM 调用（带超时 + 错误处理）
    # ----------------------------------------------------------

    async def _call_llm(self, prompt: str) -> Optional[str]:
        """调用 LLM API，返回文本响应。超时或异常返回 None。"""
        if not self._enabled or self._client is None:
            return None
        try:
            resp = await asyncio.wait_for(
                self._client.chat.completions.create(
                    model=self.model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=0.7,
                    max_tokens=256,
                ),
                timeout=LLM_TIMEOUT,
            )
            content = resp.choices[0].message.content
            logger.info("LlmAI 响应: %s", (content or "")[:200])
            return content
        except asyncio.TimeoutError:
            logger.warning("LlmAI: LLM 调用超时(%ds)", LLM_TIMEOUT)
            return None
        except Exception as e:
            logger.warning("LlmAI: LLM 调用异常: %s", e)
            return None

    async def async_choose_move(
        self, hand: Sequence[Card], top_card: Card, declared_suit: Optional[Suit]
    ) -> Move:
        """异步出牌决策。失败时 fallback 到 RuleAI。"""
        raw = await self._call_llm(_build_play_prompt(hand, top_card, declared_suit))
        if raw is not None:
            move = self.parse_move(raw, hand, top_card, declared_suit)
            if move is not None:
                return move

        self.last_strategy = ""
        return self._fallback.choose_move(hand, top_card, declared_suit)

    # ----------------------------------------------------------
    #  响应解析与验证
    # ----------------------------------------------------------

    def parse_move(
        self,
        raw: str,
        hand: Sequence[Card],
        top_card: Card,
        declared_suit: Optional[Suit],
    ) -> Optional[Move]:
        """解析 LLM 响应并验证合法性。返回 None 表示需要 fallback。"""
        data = _extract_json(raw)
        if data is None:
            logger.warning("LlmAI: JSON 解析失败")
            return None

        action = str(data.get("action", "")).lower()
        strategy = str(data.get("strategy", ""))
        legal = legal_plays(hand, top_card, declared_suit)

        if action == "draw":
            if legal:
                # 有牌可出时不允许摸牌
                logger.warning("LlmAI: 有牌可出却选择摸牌，fallback")
                return None
            self.last_strategy = strategy
            return Move.draw()

        if action != "play":
            logger.warning("LlmAI: 未知 action=%s", action)
            return None

        card = _parse_card_text(str(data.get("card", "")))
        if card is None or card not in hand:
            logger.warning("LlmAI: 手牌中没有 %r", data.get("card"))
            return None
        if not is_legal_play(card, top_card, declared_suit):
            logger.warning("LlmAI: %s 不能打在 %s 上", card.display, top_card.display)
            return None

        suit: Optional[Suit] = None
        if card.is_wild:
            remaining: List[Card] = [c for c in hand if c != card]
            try:
                suit = parse_suit(str(data.get("suit", "")))
            except ValueError:
                suit = self._fallback.choose_suit(remaining)

        self.last_strategy = strategy
        return Move.play(card, suit)


# ============================================================
#  工厂函数：从环境变量创建电脑策略
# ============================================================

def create_llm_opponent() -> LlmAI:
    """根据环境变量创建 LlmAI 实例。

    环境变量：
      CRAZY_EIGHTS_LLM_API_KEY / CRAZY_EIGHTS_LLM_BASE_URL / CRAZY_EIGHTS_LLM_MODEL
    未配置 API key 时自动 fallback 到 RuleAI。
    """
    return LlmAI(
        api_key=os.getenv("CRAZY_EIGHTS_LLM_API_KEY", ""),
        base_url=os.getenv("CRAZY_EIGHTS_LLM_BASE_URL", "https://api.deepseek.com/v1"),
        model=os.getenv("CRAZY_EIGHTS_LLM_MODEL", "deepseek-chat"),
    )
