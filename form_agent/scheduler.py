"""定时触发：每隔固定时间启动一次运行"""

import asyncio
import logging
from typing import Optional, Set

from .core import FormAgent
from .models import ObjectiveData

logger = logging.getLogger(__name__)

SCHEDULED_OBJECTIVE = ObjectiveData(
    firstName="Scheduled",
    lastName="Process",
    dateOfBirth="2000-01-01",
    medicalId="SCHED999",
    gender="Other",
    bloodType="O+",
    allergies="None",
    currentMedications="None",
    emergencyContactName="Scheduler Contact",
    emergencyContactPhone="555-0199",
)


async def _tick(agent: FormAgent, objective: ObjectiveData, tick: int):
    logger.info("[#%d] 开始定时运行...", tick)
    try:
        result = await agent.run(objective)
    except Exception as e:
        # 单次失败不影响后续调度
        logger.error("[#%d] 定时运行出错: %s", tick, e)
        return
    logger.info("[#%d] 定时运行结束：%s（%d 步）", tick, result.outcome.value, result.steps)


async def run_periodically(
    agent: FormAgent,
    interval: float,
    objective: ObjectiveData = SCHEDULED_OBJECTIVE,
    iterations: Optional[int] = None,
):
    """
    每隔 interval 秒启动一次运行，不等待上一次运行结束。

    iterations 为 None 时一直运行；否则启动 iterations 次后等待所有运行结束再返回。
    """
    running: Set[asyncio.Task] = set()
    tick = 0
    try:
        while iterations is None or tick < iterations:
            tick += 1
            task = asyncio.create_task(_tick(agent, objective, tick))
            running.add(task)
            task.add_done_callback(running.discard)
            if iterations is not None and tick >= iterations:
                break
            await asyncio.sleep(interval)
    finally:
        if running:
            await asyncio.gather(*running, return_exceptions=True)
