class AplanError(Exception):
    """Base exception for all aplan errors."""
    pass

class RecoverableError(AplanError):
    """An error that can be recovered from without data loss."""
    pass

class FatalError(AplanError):
    """An error that requires application termination or major intervention."""
    pass

class CorruptionError(FatalError):
    """Corrupted Data Error - from syntax errors in data formats, to just unknown data"""
    pass

class FileOperationError(RecoverableError):
    """File operation failed but can be retried."""
    pass

# --- Task hierarchy errors ---

class TaskError(AplanError):
    """Base for errors raised by the task hierarchy; carries the offending id."""

    message = "Task '{id}' cannot be processed"

    def __init__(self, task_id):
        self.task_id = task_id
        super().__init__(self.message.format(id=task_id))

class LookupFailure(AplanError):
    """Something addressed by id or name does not exist."""
    pass

class TaskNotFound(TaskError, LookupFailure):
    message = "Task with id '{id}' not found"

class MemberNotFound(LookupFailure):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Member '{name}' not found")

class BadTaskIdString(AplanError, ValueError):
    def __init__(self, text: str):
        self.text = text
        super().__init__(f"'{text}' is not a valid TaskId string")

class StructureError(TaskError):
    """The requested operation would break the shape of the tree."""
    pass

class NoParent(StructureError):
    message = "Root task '{id}' doesn't have a parent"

class NoChildIndex(StructureError):
    message = "Root task '{id}' doesn't have a child index"

class NoNextSibling(StructureError):
    message = "There is no next sibling for task with id: '{id}'"

class NoPrevSibling(StructureError):
    message = "There is no prev sibling for task with id: '{id}'"

class TrunkCannotBeRemoved(StructureError):
    message = "Trunk tasks like '{id}' cannot be removed"

class TrunkCannotChangeCost(StructureError):
    message = "Can't change actual cost of trunk tasks like '{id}' directly"

class TrunkCannotChangeValue(StructureError):
    message = "Can't change planned value of trunk tasks like '{id}' directly"

class TrunkCannotAddMember(StructureError):
    message = "Can't add members to trunk tasks like '{id}' directly"

class TrunkCannotRemoveMember(StructureError):
    message = "Can't remove members from trunk tasks like '{id}' directly"

class PolicyError(TaskError):
    """The tree allows the operation but member bookkeeping forbids it."""
    pass

class CannotRemoveAssignedTask(PolicyError):
    message = "Can't remove task '{id}' since it has members assigned to it"

class CannotRemoveMemberFromTask(PolicyError):
    def __init__(self, task_id, name: str):
        self.name = name
        self.task_id = task_id
        AplanError.__init__(
            self,
            f"Can't remove member '{name}' from a task '{task_id}', since it hasn't been assigned to them"
        )
