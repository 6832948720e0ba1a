from .errors import DanglingElifOrElse

class ConditionalStack:
    """Nested #if-family state for one processed text.

    Every frame holds parent_active (was the enclosing scope emitting when the
    frame was pushed), active (is the current branch emitting) and taken (has
    some branch of this chain already been selected).
    """

    def __init__(self):
        self.stack = []

    def __len__(self):
        return len(self.stack)

    def current_active(self):
        if not self.stack:
            return True
        return self.stack[-1]["active"]

    def push(self, condition, line=None):
        """Opens a frame. `condition` may be a callable, evaluated only in an active scope."""
        parent_active = self.current_active()
        result = False
        if parent_active:
            result = bool(condition() if callable(condition) else condition)
        self.stack.append({"parent_active": parent_active, "active": result, "taken": result, "line": line})
        return result

    def elif_(self, condition):
        frame = self.top("#elif")
        if not frame["parent_active"] or frame["taken"]:
            # Parent inactive or an earlier branch won
            frame["active"] = False
            return False

        result = bool(condition() if callable(condition) else condition)
        frame["active"] = result
        if result:
            frame["taken"] = True
        return result

    def else_(self):
        frame = self.top("#else")
        if not frame["parent_active"] or frame["taken"]:
            frame["active"] = False
        else:
            frame["active"] = True
            frame["taken"] = True
        return frame["active"]

    def endif(self):
        self.top("#endif")
        self.stack.pop()

    def top(self, directive):
        if not self.stack:
            raise DanglingElifOrElse(f"{directive} without #if")
        return self.stack[-1]
