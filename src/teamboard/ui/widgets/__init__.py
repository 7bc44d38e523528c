"""Widget components."""

from .command_bar import CommandBar
from .confirm_modal import ConfirmModal
from .item_detail_modal import ItemDetailModal, ItemEdit
from .new_item_modal import NewItemModal, NewItemRequest
from .people_modal import PeopleModal, PersonEdit
from .text_prompt_modal import TextPromptModal
from .work_item_table import WorkItemTable

__all__ = [
    "CommandBar",
    "ConfirmModal",
    "ItemDetailModal",
    "ItemEdit",
    "NewItemModal",
    "NewItemRequest",
    "PeopleModal",
    "PersonEdit",
    "TextPromptModal",
    "WorkItemTable",
]
