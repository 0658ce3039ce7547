"""
The global scope: what every program can see without binding anything.

Only `typeOf` is offered as a function; the rest of the Nix builtin library
belongs to the embedding.
"""
from .values import Str, Primitive, Attrset, TRUE, FALSE, NULL

def _type_of(value): return Str(value.type_name)

type_of_primitive = Primitive("typeOf", _type_of)

BUILTINS = Attrset({
	"typeOf": type_of_primitive,
	"true": TRUE,
	"false": FALSE,
	"null": NULL,
})

GLOBALS = {
	"builtins": BUILTINS,
	"true": TRUE,
	"false": FALSE,
	"null": NULL,
}
