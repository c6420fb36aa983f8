"""Decision logger — two lines per decision in logs/decisions_<game_id>.log

Format
------
  <kind> <position>: <context summary>   — what the seat was asked to decide
  <decision> (<source>)                   — the answer and where it came from
"""
import os
import re

from .config import LOGS_DIR


class DecisionLogger:
    def __init__(self, game_id: str, logs_dir: str = None):
        logs_dir = logs_dir or LOGS_DIR
        os.makedirs(logs_dir, exist_ok=True)
        safe_id = re.sub(r'[^A-Za-z0-9_-]', '_', str(game_id))
        self.path = os.path.join(logs_dir, f'decisions_{safe_id}.log')

    def log_step(self, asked: str, decided: str):
        with open(self.path, 'a', encoding='utf-8') as f:
            f.write(asked + '\n')
            f.write(decided + '\n')
