"""
配置文件載入

配置文件為 JSON 格式，例如：

    {
        "experiment": {"name": "onemax"},
        "evolution": {
            "population_size": 100,
            "offspring_fraction": 0.6,
            "maximal_phenotype_age": 70,
            "optimize": "max",
            "individual_creation_retries": 10,
            "max_workers": 4,
            "evaluator": "concurrent"
        }
    }
"""

from pathlib import Path
from typing import Any, Dict, Union
import json
import logging

logger = logging.getLogger(__name__)


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    載入配置文件

    Args:
        config_path: 配置文件路徑

    Returns:
        配置字典

    Raises:
        FileNotFoundError: 配置文件不存在
        ValueError: 配置文件不是 JSON 物件或缺少 evolution 區段
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"配置文件不存在: {config_path}")

    with open(config_file, 'r', encoding='utf-8') as f:
        config = json.load(f)

    if not isinstance(config, dict):
        raise ValueError(f"配置文件必須是 JSON 物件: {config_path}")
    if 'evolution' not in config:
        raise ValueError("配置文件缺少必要部分: evolution")

    name = config.get('experiment', {}).get('name', config_file.stem)
    logger.info(f"📄 配置載入成功: {name}")
    return config
