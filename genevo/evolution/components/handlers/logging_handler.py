"""
日誌處理器

每個世代輸出一行摘要。
"""

import logging

from .base import EventHandler

logger = logging.getLogger(__name__)


class LoggingHandler(EventHandler):
    """把演化進度寫入 logging"""

    name = "logging_handler"

    def __init__(self, level: int = logging.INFO, log_interval: int = 1):
        if log_interval < 1:
            raise ValueError(f"log_interval must be >= 1, got {log_interval}")
        self.level = level
        self.log_interval = log_interval

    def on_evolution_start(self, start=None, **kwargs):
        if start is not None:
            logger.log(self.level, f"🚀 開始演化: 族群={len(start.population)}, 起始世代={start.generation}")

    def on_generation_complete(self, result=None, **kwargs):
        if result is None or result.total_generations % self.log_interval != 0:
            return
        logger.log(
            self.level,
            f"第 {result.generation} 世代: 最佳={result.best_fitness}, 最差={result.worst_fitness}, "
            f"淘汰={result.kill_count}, 無效={result.invalid_count}, 變異={result.alter_count}, "
            f"耗時={result.durations.evolve:.4f}s"
        )

    def on_evolution_complete(self, result=None, **kwargs):
        if result is not None:
            logger.log(
                self.level,
                f"✅ 演化完成: 共 {result.total_generations} 個世代, 最佳適應度={result.best_fitness}"
            )
