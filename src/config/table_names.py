from enum import Enum


class TableNames(str, Enum):
    INVITATIONS = "invitations"
    GUESTS = "guests"
    RSVP_RESPONSES = "rsvp_responses"
