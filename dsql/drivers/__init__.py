"""Database drivers implementing the DSQL driver contract."""
from dsql.drivers.base import Driver
from dsql.drivers.dbapi import DBAPIDriver

__all__ = ["Driver", "DBAPIDriver"]
