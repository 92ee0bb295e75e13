"""target-facing identifiers derived from table names

table names are things like "fence.i", "OP-IMM-32" or "i·sh5": these turn
them into snake_case ("fence_i") and TitleCase ("FenceI") identifiers.  a
leading digit gets an underscore in front of it.
"""


def make_ident_underscores(name):
    chars = []
    for (idx, char) in enumerate(name):
        if char.isdigit():
            if idx == 0:
                chars.append("_")
            chars.append(char)
        elif char.isalpha():
            chars.append(char.lower())
        else:
            chars.append("_")
    return "".join(chars)


def make_ident_title(name):
    chars = []
    upper = True
    for (idx, char) in enumerate(name):
        if char.isdigit():
            if idx == 0:
                chars.append("_")
            chars.append(char)
            upper = True
        elif char.isalpha():
            chars.append(char.upper() if upper else char.lower())
            upper = False
        else:
            upper = True
    return "".join(chars)
