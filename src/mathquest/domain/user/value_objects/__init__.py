from mathquest.domain.user.value_objects.role import RoleName

__all__ = ["RoleName"]
