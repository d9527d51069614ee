"""Example extension function: join strings with a separator."""

from extreg import ExtensionFunctionDefinition, QualifiedName


class Join(ExtensionFunctionDefinition):
    """Join all but the last argument using the last one as separator."""

    min_args = 2

    @property
    def function_qname(self) -> QualifiedName:
        return QualifiedName(prefix="str", uri="http://example.org/strings", local_name="join")

    def call(self, *args):
        *parts, separator = args
        return str(separator).join(str(p) for p in parts)

    def on_register(self, configuration) -> None:
        self.registered = True
