"""
Pytest bootstrap.
Settings are read at import time, so the testing environment has to be in
place before anything imports ``core.config``.
"""
import os

os.environ["TESTING"] = "True"
os.environ["DEBUG"] = "False"
os.environ["ADMIN_EMAIL"] = ""
os.environ["ADMIN_PASSWORD"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
