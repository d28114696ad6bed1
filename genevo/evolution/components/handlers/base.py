"""
事件處理器基類

定義演化流在迭代過程中事件處理的基本接口。
"""

from typing import Any


class EventHandler:
    """
    事件處理器基類

    子類只需覆寫感興趣的事件方法。EvolutionStream 會以關鍵字參數呼叫：

    - on_evolution_start(stream=..., start=...)
    - on_generation_complete(result=...)
    - on_evolution_complete(result=...)
    """

    name = "base_handler"

    def handle_event(self, event_name: str, **kwargs: Any):
        """
        依事件名稱分派到對應的 on_* 方法

        Args:
            event_name: 事件名稱
            **kwargs: 事件參數
        """
        method = getattr(self, f'on_{event_name}', None)
        if method is not None:
            method(**kwargs)

    def on_evolution_start(self, **kwargs):
        """演化開始事件"""
        pass

    def on_generation_complete(self, **kwargs):
        """世代完成事件"""
        pass

    def on_evolution_complete(self, **kwargs):
        """演化完成事件"""
        pass
