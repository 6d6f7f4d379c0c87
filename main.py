"""疯狂 8 点 - 终端人机对局入口"""

import sys
import argparse
import logging
import random
from typing import Optional

from crazy_eights.ai.rule_ai import RuleAI
from crazy_eights.engine.card import parse_suit
from crazy_eights.engine.move import MoveAction
from crazy_eights.game.controller import GameController
from crazy_eights.game.errors import CrazyEightsError
from crazy_eights.game.game_state import GameStatus
from crazy_eights.game.player import Side
from crazy_eights.ui.renderer import TerminalRenderer


def player_turn(gc: GameController, renderer: TerminalRenderer) -> bool:
    """处理一次人类玩家输入，返回 False 表示退出"""
    view = gc.view()
    renderer.show_table(view)
    print(f"  {renderer.format_hand_with_index(view.player_hand, view.legal_cards)}")
    text = input("  出牌输入序号，d=摸牌，q=退出: ").strip().lower()

    if text == "q":
        return False
    try:
        if text == "d":
            gc.draw(Side.PLAYER)
        elif text.isdecimal() and 1 <= int(text) <= len(view.player_hand):
            gc.play(Side.PLAYER, view.player_hand[int(text) - 1])
        else:
            print("  无法识别的输入")
    except CrazyEightsError as e:
        print(f"  ⚠️ {e}")
    return True


def declare_suit_prompt(gc: GameController) -> bool:
    """玩家打出 8 后输入花色，返回 False 表示退出"""
    while True:
        text = input("  指定花色 (hearts/diamonds/clubs/spades 或 ♥♦♣♠): ").strip()
        if text.lower() == "q":
            return False
        try:
            gc.declare_suit(parse_suit(text))
            return True
        except ValueError as e:
            print(f"  ⚠️ {e}")


def auto_player_turn(gc: GameController, ai: RuleAI) -> None:
    """自动模式：人类一方也由 RuleAI 代打"""
    s = gc.state
    if s.status == GameStatus.AWAITING_SUIT:
        gc.declare_suit(ai.choose_suit(s.player_hand))
        return
    move = ai.choose_move(s.player_hand, s.top_card, s.declared_suit)
    if move.action == MoveAction.DRAW:
        gc.draw(Side.PLAYER)
    else:
        gc.play(Side.PLAYER, move.card)


def run_one_game(delay: float = 0.8, auto: bool = False, rng: Optional[random.Random] = None) -> Optional[Side]:
    """运行一局完整对局，返回胜利方；中途退出返回 None"""
    renderer = TerminalRenderer(delay=delay)
    gc = GameController(strategy=RuleAI(rng=rng), rng=rng)
    gc.on_event(renderer.make_event_callback())
    autopilot = RuleAI(rng=rng) if auto else None

    renderer.print_header("🃏 疯狂 8 点 开始")
    gc.start()

    while not gc.state.is_over:
        if gc.is_computer_turn():
            if delay:
                renderer.pause()
            gc.run_computer_turn()
        elif autopilot is not None:
            auto_player_turn(gc, autopilot)
        elif gc.state.status == GameStatus.AWAITING_SUIT:
            if not declare_suit_prompt(gc):
                return None
        elif not player_turn(gc, renderer):
            return None

    renderer.show_result(gc.view())
    return gc.state.winner


def main():
    """命令行入口"""
    parser = argparse.ArgumentParser(description="疯狂 8 点人机对局")
    parser.add_argument("--rounds", type=int, default=1, help="对局数 (默认1)")
    parser.add_argument("--delay", type=float, default=0.8, help="电脑思考延迟秒数 (默认0.8)")
    parser.add_argument("--fast", action="store_true", help="快速模式 (无延迟)")
    parser.add_argument("--auto", action="store_true", help="自动模式 (你的一方由 AI 代打)")
    parser.add_argument("--seed", type=int, default=None, help="随机种子 (复现对局)")
    parser.add_argument("--log-level", default="WARNING", help="日志级别 (默认WARNING)")
    parser.add_argument("--web", action="store_true", help="启动 WebSocket 网页版 (uvicorn)")
    parser.add_argument("--host", default="127.0.0.1", help="网页版监听地址")
    parser.add_argument("--port", type=int, default=8000, help="网页版端口 (默认8000)")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    if args.web:
        import uvicorn
        uvicorn.run("crazy_eights.web.server:app", host=args.host, port=args.port)
        return

    delay = 0.0 if args.fast else args.delay
    rng = random.Random(args.seed) if args.seed is not None else None

    for i in range(args.rounds):
        if args.rounds > 1:
            print(f"\n{'=' * 60}")
            print(f"  第 {i + 1}/{args.rounds} 局")
            print(f"{'=' * 60}")
        if run_one_game(delay=delay, auto=args.auto, rng=rng) is None:
            print("  已退出")
            break


if __name__ == "__main__":
    main()
