"""Example extension function: upper-case a string."""

from extreg import ExtensionFunctionDefinition, QualifiedName


class UpperCase(ExtensionFunctionDefinition):
    """Return the argument upper-cased.

    Demonstrates the minimal extension function interface:
    - a no-argument constructor
    - function_qname (prefix, namespace URI, local name)
    - call(*args)
    """

    min_args = 1
    max_args = 1

    @property
    def function_qname(self) -> QualifiedName:
        return QualifiedName(prefix="str", uri="http://example.org/strings", local_name="upper")

    def call(self, *args):
        return str(args[0]).upper()
