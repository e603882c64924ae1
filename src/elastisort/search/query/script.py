"""
Script values used by script-based sorting.

The scripting language itself is opaque here: a Script is source text (or the
id of a stored script), an optional language and a parameter mapping.
"""

from typing import Any, Dict, Optional, Union

from ...core.exceptions import ValidationError
from ...core.serialization import ensure_serializable

SCRIPT_TYPE_SOURCE = "source"
SCRIPT_TYPE_ID = "id"


class Script:
    """
    Script reference with parameters.

    Example:
        >>> Script("doc['price'].value * factor").param("factor", 1.1).source()
        {'source': "doc['price'].value * factor", 'params': {'factor': 1.1}}
    """

    def __init__(self, script: str):
        self.script = script
        self._type = SCRIPT_TYPE_SOURCE
        self._lang: Optional[str] = None
        self._params: Dict[str, Any] = {}

    @classmethod
    def stored(cls, script_id: str) -> "Script":
        """Create a reference to a stored script by id."""
        return cls(script_id).type_(SCRIPT_TYPE_ID)

    def type_(self, script_type: str) -> "Script":
        if script_type not in (SCRIPT_TYPE_SOURCE, SCRIPT_TYPE_ID):
            raise ValueError(f"Invalid script type: {script_type}")
        self._type = script_type
        return self

    def lang(self, lang: str) -> "Script":
        self._lang = lang
        return self

    def param(self, name: str, value: Any) -> "Script":
        self._params[name] = value
        return self

    def params(self, params: Dict[str, Any]) -> "Script":
        self._params = dict(params)
        return self

    def source(self) -> Union[str, Dict[str, Any]]:
        """
        Produce the script document.

        A plain inline script without language or parameters serializes to its
        bare source string.

        Raises:
            EncodingError: If a parameter value is not JSON-serializable
        """
        if self._type == SCRIPT_TYPE_SOURCE and self._lang is None and not self._params:
            return self.script

        document: Dict[str, Any] = {self._type: self.script}
        if self._lang is not None:
            document["lang"] = self._lang
        if self._params:
            ensure_serializable(self._params, "script params")
            document["params"] = dict(self._params)
        return document

    @classmethod
    def from_source(cls, document: Union[str, Dict[str, Any]]) -> "Script":
        """
        Rebuild a Script from its document.

        Raises:
            ValidationError: If the document is neither a string nor a script object
        """
        if isinstance(document, str):
            return cls(document)
        if not isinstance(document, dict):
            raise ValidationError(f"Invalid script document: {document!r}")

        if SCRIPT_TYPE_SOURCE in document:
            script = cls(document[SCRIPT_TYPE_SOURCE])
        elif SCRIPT_TYPE_ID in document:
            script = cls.stored(document[SCRIPT_TYPE_ID])
        else:
            raise ValidationError("Script document needs a 'source' or 'id' key")
        if "lang" in document:
            script.lang(document["lang"])
        if document.get("params"):
            script.params(document["params"])
        return script

    def __repr__(self) -> str:
        return f"Script({self.script!r}, type={self._type!r}, params={self._params!r})"
