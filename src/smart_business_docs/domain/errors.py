"""Domain exceptions."""

from uuid import UUID


class ConversationNotFound(Exception):
    """Raised when a conversation does not exist or belongs to another user."""

    def __init__(self, conversation_id: UUID):
        super().__init__(f"Conversation {conversation_id} not found")
        self.conversation_id = conversation_id


class ProjectNotFound(Exception):
    """Raised when a project does not exist or belongs to another user."""

    def __init__(self, project_id: UUID):
        super().__init__(f"Project {project_id} not found")
        self.project_id = project_id


class LLMError(Exception):
    """Raised when the generative AI provider call fails."""

    def __init__(self, message: str, is_api_key_error: bool = False):
        super().__init__(message)
        self.is_api_key_error = is_api_key_error
