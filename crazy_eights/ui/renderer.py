"""终端可视化渲染器 - 在终端中展示疯狂 8 点对局"""

import time
from typing import List, Optional

from crazy_eights.engine.card import Card, RED_SUITS, SUIT_NAME
from crazy_eights.game.game_state import GameEvent, GameStatus, GameView
from crazy_eights.game.player import Side


# 颜色常量 (ANSI)
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
CYAN = "\033[96m"
BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"

SIDE_COLOR = {
    Side.PLAYER: GREEN,
    Side.COMPUTER: CYAN,
}


class TerminalRenderer:
    """终端可视化渲染器"""

    def __init__(self, delay: float = 0.8):
        self.delay = delay  # 每步之间的延迟（秒）

    def pause(self, seconds: float = 0) -> None:
        """暂停"""
        time.sleep(seconds or self.delay)

    # ============================================================
    #  牌面渲染
    # ============================================================

    @staticmethod
    def format_card(card: Card, highlight: bool = False) -> str:
        color = RED if card.suit in RED_SUITS else ""
        style = BOLD if highlight else ""
        return f"{style}{color}{card.display}{RESET}" if (color or style) else card.display

    def format_cards(self, cards: List[Card], legal: Optional[List[Card]] = None) -> str:
        """将牌列表格式化为彩色字符串，可出的牌加粗"""
        legal = legal or []
        return " ".join(self.format_card(c, c in legal) for c in cards)

    def format_hand_with_index(self, cards: List[Card], legal: List[Card]) -> str:
        """带序号的手牌，供玩家输入选择；不可出的牌变暗"""
        parts = []
        for i, c in enumerate(cards, 1):
            text = f"{i}:{self.format_card(c, c in legal)}"
            parts.append(text if c in legal else f"{DIM}{text}{RESET}")
        return "  ".join(parts)

    @staticmethod
    def format_side(side: Side) -> str:
        return f"{SIDE_COLOR[side]}{BOLD}{side.display}{RESET}"

    # ============================================================
    #  分隔线与标题
    # ============================================================

    @staticmethod
    def separator(char: str = "─", width: int = 60) -> str:
        return char * width

    def print_header(self, title: str) -> None:
        """打印带框的标题"""
        print(f"\n{YELLOW}{BOLD}{'═' * 60}{RESET}")
        print(f"{YELLOW}{BOLD}  {title}{RESET}")
        print(f"{YELLOW}{BOLD}{'═' * 60}{RESET}\n")

    # ============================================================
    #  牌桌展示
    # ============================================================

    def show_table(self, view: GameView) -> None:
        """展示当前牌桌（电脑手牌只显示张数）"""
        print(self.separator())
        print(f"  电脑手牌: {'🂠 ' * view.computer_hand_size}({view.computer_hand_size}张)")
        top = self.format_card(view.top_card) if view.top_card else "-"
        suit_text = ""
        if view.declared_suit is not None:
            suit_text = f"  {YELLOW}指定花色: {SUIT_NAME[view.declared_suit]}{RESET}"
        print(f"  顶牌: {top}{suit_text}    摸牌堆: {view.draw_pile_size}张")
        print(f"  你的手牌 ({len(view.player_hand)}张): {self.format_cards(view.player_hand, view.legal_cards)}")
        print(self.separator())

    def show_event(self, event: GameEvent) -> None:
        """展示一条事件"""
        if event.action in ("start", "reset"):
            return
        if event.action == "reshuffle":
            print(f"  {DIM}{event.message}{RESET}")
            return
        if event.action == "win":
            return
        side = self.format_side(event.side) if event.side else ""
        if event.action == "play":
            print(f"  {side} 打出 {self.format_card(event.card)}")
        elif event.action == "draw":
            # 电脑摸到的牌不展示
            card = self.format_card(event.card) if event.side is Side.PLAYER else "一张牌"
            print(f"  {side} 摸了 {card}")
        elif event.action == "declare":
            print(f"  {side} 指定花色为 {YELLOW}{SUIT_NAME[event.suit]}{RESET}")
        elif event.action == "forfeit":
            print(f"  {side}: {DIM}{event.message}{RESET}")

    def show_result(self, view: GameView) -> None:
        """展示游戏结果"""
        self.print_header("🏆 游戏结束")
        if view.status == GameStatus.CONCLUDED and view.winner is not None:
            print(f"  胜利方: {self.format_side(view.winner)}")
        print(f"  {view.last_action}\n")

    def make_event_callback(self):
        """创建事件回调函数，供 GameController.on_event() 使用"""
        renderer = self

        def callback(event: GameEvent) -> None:
            renderer.show_event(event)
            if renderer.delay and event.side is Side.COMPUTER and event.action in ("play", "draw"):
                renderer.pause(0.3)

        return callback
