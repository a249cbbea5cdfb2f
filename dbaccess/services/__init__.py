from dbaccess.services.database_access import DatabaseAccess

__all__ = ["DatabaseAccess"]
