# riskboard/db/base.py
from sqlalchemy.orm import declarative_base

# Single declarative Base shared by every model so metadata is unified
Base = declarative_base()
