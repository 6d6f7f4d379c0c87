"""WebSocket 后端服务 - 每个连接一局人机对战，实时推送状态到前端"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse

from crazy_eights.ai.llm_ai import create_llm_opponent
from crazy_eights.ai.rule_ai import RuleAI
from crazy_eights.engine.card import Card, SUIT_NAME, card_from_key, parse_suit
from crazy_eights.game.controller import GameController
from crazy_eights.game.errors import CrazyEightsError
from crazy_eights.game.game_state import GameState, GameView
from crazy_eights.game.player import Side
from crazy_eights.game.scheduler import ComputerTurnScheduler

logger = logging.getLogger(__name__)

# 电脑思考时间（秒），测试环境可设为 0
THINK_DELAY = float(os.getenv("CRAZY_EIGHTS_THINK_DELAY", "1.5"))


# ============================================================
#  序列化工具
# ============================================================

def card_to_dict(c: Card) -> dict:
    """将 Card 序列化为前端可用的 dict"""
    return {
        "key": c.key,
        "rank": c.rank.value,
        "suit": c.suit.value,
        "display": c.display,
        "is_wild": c.is_wild,
    }


def view_to_dict(view: GameView) -> dict:
    """将 GameView 序列化；电脑手牌只给张数"""
    return {
        "draw_pile_size": view.draw_pile_size,
        "top_card": card_to_dict(view.top_card) if view.top_card else None,
        "declared_suit": view.declared_suit.value if view.declared_suit else None,
        "effective_suit": view.effective_suit.value if view.effective_suit else None,
        "player_hand": [card_to_dict(c) for c in view.player_hand],
        "computer_hand_size": view.computer_hand_size,
        "turn": view.turn.value,
        "status": view.status.value,
        "winner": view.winner.value if view.winner else None,
        "last_action": view.last_action,
        "legal_cards": [c.key for c in view.legal_cards],
    }


def create_strategy():
    """配置了 LLM API key 时使用 LlmAI，否则使用 RuleAI"""
    if os.getenv("CRAZY_EIGHTS_LLM_API_KEY"):
        return create_llm_opponent()
    return RuleAI()


# ============================================================
#  单个连接的对局会话
# ============================================================

class GameSession:
    """一个 WebSocket 连接对应的一局游戏"""

    def __init__(self, ws: WebSocket, delay: Optional[float] = None):
        self.ws = ws
        if delay is None:
            delay = THINK_DELAY
        self.controller = GameController(strategy=create_strategy())
        self.scheduler = ComputerTurnScheduler(
            self.controller, delay=delay, on_applied=self._on_computer_applied,
        )

    async def send(self, msg: dict) -> None:
        await self.ws.send_text(json.dumps(msg, ensure_ascii=False))

    async def send_state(self) -> None:
        await self.send({"type": "state", "state": view_to_dict(self.controller.view())})

    async def send_error(self, message: str) -> None:
        await self.send({"type": "error", "message": message})

    async def _on_computer_applied(self, state: GameState) -> None:
        strategy_text = getattr(self.controller.strategy, "last_strategy", "")
        await self.send({
            "type": "state",
            "state": view_to_dict(GameView.from_state(state)),
            "strategy": strategy_text,
        })

    async def _after_player_action(self) -> None:
        """推送状态；若轮到电脑，安排一次延迟行动"""
        await self.send_state()
        if self.scheduler.maybe_schedule() is not None:
            await self.send({"type": "thinking", "seconds": self.scheduler.delay})

    async def handle(self, msg: dict) -> None:
        """处理一条前端指令；非法操作以 error 消息反馈，不中断连接"""
        action = msg.get("action")
        gc = self.controller
        try:
            if action == "start":
                self.scheduler.cancel()
                if not gc.state.is_over:
                    gc.reset()
                gc.start()
            elif action == "reset":
                self.scheduler.cancel()
                gc.reset()
            elif action == "draw":
                gc.draw(Side.PLAYER)
            elif action == "play":
                gc.play(Side.PLAYER, card_from_key(str(msg.get("card", ""))))
            elif action == "declare":
                gc.declare_suit(parse_suit(str(msg.get("suit", ""))))
            else:
                await self.send_error(f"未知指令: {action}")
                return
        except CrazyEightsError as e:
            logger.info("拒绝非法操作 %s: %s", action, e)
            await self.send_error(str(e))
            return
        except ValueError as e:
            await self.send_error(str(e))
            return
        await self._after_player_action()

    def close(self) -> None:
        self.scheduler.cancel()


# ============================================================
#  FastAPI 应用
# ============================================================

STATIC_DIR = Path(__file__).parent / "static"

app = FastAPI(title="疯狂 8 点")
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.get("/")
async def index():
    """返回前端页面"""
    return FileResponse(str(STATIC_DIR / "index.html"))


@app.get("/suits")
async def suits():
    """花色列表（供前端渲染指定花色按钮）"""
    return [{"suit": s.value, "name": name} for s, name in SUIT_NAME.items()]


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    """WebSocket 端点：每个连接独立一局，先推送初始状态"""
    await ws.accept()
    session = GameSession(ws)
    try:
        await session.send_state()
        while True:
            data = await ws.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                await session.send_error("消息格式错误")
                continue
            if not isinstance(msg, dict):
                await session.send_error("消息格式错误")
                continue
            await session.handle(msg)
    except (WebSocketDisconnect, RuntimeError):
        pass
    finally:
        session.close()
