"""
Field name translation.

Descriptor fields are written in mixed/camel case (or snake case) and are
exposed on the command line as lowercase, hyphen-separated names:

    FooBar                  -> foo-bar
    FOO                     -> foo
    FirstNameLOLCat         -> first-name-lol-cat
    FooBar_baz_CATz_LOLCaT  -> foo-bar-baz-catz-lol-ca-t
    Plan9From800Outer_space -> plan9-from800-outer-space

The rules are expressed on the *case shape* of the identifier rather than on
the identifier itself: every character is mapped to one class symbol
('U' uppercase letter, 'l' other letter or decimal digit, '-' and '_' kept,
'x' anything else), the patterns run over that shape string and the matched
spans are spliced back from the original text. This keeps the rules
Unicode-aware with the standard re module.
"""
import functools
import re
import unicodedata

# pass 1: "Word_" becomes a "-Word-" boundary; an acronym glued to the next
# capitalized word ("LOLCat") is split before that word ("LOL-Cat").
_BOUNDARIES = re.compile(r"(U+l+)_|(U+)(Ul)")

# pass 2: a hyphen after every capitalized word, separator runs collapsed.
_WORDS = re.compile(r"([^_-])[_-]+|(Ul+)[_-]*")


def _classify(char):
    if char in "-_":
        return char
    match unicodedata.category(char):
        case "Lu":
            return "U"
        case "Ll" | "Lt" | "Lm" | "Lo" | "Nd":
            return "l"
        case _:
            return "x"


def _splice(pattern, text, replace):
    """
    run pattern over the case shape of text and rebuild text from the matches.

    replace receives a getter mapping a group number to the original text of
    that group ("" when the group did not participate) and returns the
    replacement for the whole match.
    """
    shape = "".join(map(_classify, text))
    parts = []
    last = 0
    for match in pattern.finditer(shape):
        def group(number, /, match=match):
            start, end = match.span(number)
            return text[start:end] if start >= 0 else ""

        parts.append(text[last:match.start()])
        parts.append(replace(group))
        last = match.end()
    parts.append(text[last:])
    return "".join(parts)


@functools.cache
def translate(name, /):
    """
    translate a field name into its command-line form.

    Separator hyphens left at either end are dropped. Degenerate inputs
    (empty strings, digits only) pass through lowercased.
    """
    if not isinstance(name, str):
        raise TypeError("translate() argument must be a string")

    name = _splice(_BOUNDARIES, name, lambda group: (
        "-" + group(1) + "-" if group(1) else group(2) + "-" + group(3)
    ))
    name = _splice(_WORDS, name, lambda group: group(1) + group(2) + "-")
    return name.strip("-").lower()


__all__ = (
    "translate",
)
