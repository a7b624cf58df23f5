"""Host double and node builders shared by the tests."""

from i18n_sync.host import Host


class MemoryHost(Host):
    """Host backed by plain Python objects."""

    def __init__(self, selection=None, settings=None):
        self.selection = list(selection or [])
        self.settings = settings
        self.persisted = []
        self.notifications = []
        self.renamed = {}
        self.fail_persist = False
        self._listeners = []

    def current_selection(self):
        return self.selection

    def on_selection_changed(self, callback):
        self._listeners.append(callback)

    def select(self, nodes):
        self.selection = list(nodes)
        for callback in self._listeners:
            callback()

    def load_settings(self):
        return self.settings

    def persist_settings(self, blob):
        if self.fail_persist:
            return False
        self.persisted.append(blob)
        self.settings = blob
        return True

    def rename_node(self, node_id, new_name):
        self.renamed[node_id] = new_name
        return True

    def notify(self, message):
        self.notifications.append(message)


def text_node(node_id, characters, name="Text"):
    return {"id": node_id, "type": "TEXT", "name": name, "characters": characters}


def frame(node_id, children, name="Frame"):
    return {"id": node_id, "type": "FRAME", "name": name, "children": list(children)}
