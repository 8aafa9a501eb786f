# tests/conftest.py
import sys
import os

# add the project root to sys.path so `engarde` imports resolve
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# keep test runs from writing timestamped log files
os.environ.setdefault('ENGARDE_LOG_FILE', '0')
