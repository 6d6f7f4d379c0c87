"""电脑回合调度 - 带“思考”延迟的可取消异步任务"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from crazy_eights.engine.move import Move
from crazy_eights.game.controller import GameController
from crazy_eights.game.game_state import GameState

logger = logging.getLogger(__name__)

# 电脑行动完成后的回调（如推送最新状态）
AppliedCallback = Callable[[GameState], Awaitable[None]]


class ComputerTurnScheduler:
    """
    电脑回合调度器。

    轮到电脑时创建一个异步任务：先等待思考延迟，再决策并执行。
    任务创建时记下 turn_token，执行前若状态已变化（重开、重置等），
    决策直接丢弃，不会作用到新的对局上。
    """

    def __init__(
        self,
        controller: GameController,
        delay: float = 1.5,
        on_applied: Optional[AppliedCallback] = None,
    ):
        self.controller = controller
        self.delay = delay
        self.on_applied = on_applied
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def maybe_schedule(self) -> Optional[asyncio.Task]:
        """若轮到电脑且没有待执行的任务，则安排一次电脑回合"""
        if not self.controller.is_computer_turn() or self.pending:
            return None
        token = self.controller.turn_token
        self._task = asyncio.ensure_future(self._run(token))
        self._task.add_done_callback(self._log_failure)
        return self._task

    @staticmethod
    def _log_failure(task: asyncio.Task) -> None:
        """取走任务异常并记录（如推送状态时连接已断开）"""
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("电脑回合执行失败: %r", exc)

    def cancel(self) -> None:
        """放弃正在思考的电脑回合"""
        if self.pending:
            self._task.cancel()
        self._task = None

    async def _decide(self) -> Move:
        strategy = self.controller.strategy
        decide_async = getattr(strategy, "async_choose_move", None)
        if decide_async is None:
            return self.controller.decide_computer_move()
        s = self.controller.state
        return await decide_async(s.computer_hand, s.top_card, s.declared_suit)

    async def _run(self, token) -> Optional[GameState]:
        await asyncio.sleep(self.delay)
        if token != self.controller.turn_token:
            logger.info("电脑思考期间对局已变化，放弃本次行动")
            return None

        move = await self._decide()
        new_state = self.controller.apply_computer_move(move, token)
        if new_state is None:
            return None

        if self.on_applied is not None:
            await self.on_applied(new_state)
        return new_state
