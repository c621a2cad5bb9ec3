from enum import StrEnum


class FieldSizes:
    ID = 32
    NAME = 40
    TITLE = 100
    MEDIUM = 255
    LONG = 500


class BoardOperation(StrEnum):
    READ = "read"
    EDIT_CONTENT = "edit_content"
    UPDATE = "update"
    DELETE = "delete"
    ADD_MEMBER = "add_member"
    REMOVE_MEMBER = "remove_member"


class EventType(StrEnum):
    TASK_CREATED = "taskCreated"
    ACTIVITY_ADDED = "activityAdded"


class ClientMessage(StrEnum):
    JOIN = "join"
    LEAVE = "leave"
    PING = "ping"


class ServerMessage(StrEnum):
    JOINED = "joined"
    LEFT = "left"
    PONG = "pong"
    ERROR = "error"
