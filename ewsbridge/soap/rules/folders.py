"""
Folders, as sent with CreateFolder and UpdateFolder.
"""
from ewsbridge.lib.namespace import NS_EWS_MESSAGES
from ewsbridge.lib.namespace import NS_EWS_TYPES
from ewsbridge.soap.rules import rule
from ewsbridge.soap.rules import text_of
from ewsbridge.soap.types import members


@rule("folders")
def folders(b, folders):
    """``[{"folder": {"display_name": {"text": "New"}}}, {"calendar_folder": {...}}]``"""
    with b.node(NS_EWS_MESSAGES, "Folders"):
        for fold in members(folders, "folders"):
            for ftype, vars_ in fold.items():
                b.build_member(ftype, vars_)


def _folder(b, folder, wire_name):
    with b.node(NS_EWS_TYPES, wire_name):
        for k, v in folder.items():
            if k == "folder_id":
                b.dispatch_folder_id(v)
            else:
                b.build_member(k, v)


@rule("folder")
def folder(b, folder):
    _folder(b, folder, "Folder")


@rule("calendar_folder")
def calendar_folder(b, folder):
    _folder(b, folder, "CalendarFolder")


@rule("contacts_folder")
def contacts_folder(b, folder):
    _folder(b, folder, "ContactsFolder")


@rule("search_folder")
def search_folder(b, folder):
    _folder(b, folder, "SearchFolder")


@rule("tasks_folder")
def tasks_folder(b, folder):
    _folder(b, folder, "TasksFolder")


@rule("folder_class")
def folder_class(b, value):
    b.types("FolderClass", text_of(value))


@rule("display_name")
def display_name(b, name):
    b.types("DisplayName", text_of(name))
