import os
import sys
import tempfile

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)

# api.py creates its output folder at import time
os.environ.setdefault("OUTPUT_FOLDER", tempfile.mkdtemp(prefix="space_program_outputs_"))
