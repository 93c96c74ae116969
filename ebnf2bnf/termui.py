import click

colors = False

S_ATTENTION = {'fg': 'red', 'bold': True}
S_HEADER = {'fg': 'green'}
S_EMPH = {'fg': 'yellow'}


def prints(message, err=False):
    click.echo(message, err=err, color=colors)


def style_message(message, style):
    if colors:
        return click.style(message, **style)
    else:
        return message


def s_header(message):
    return style_message(message, S_HEADER)


def s_attention(message):
    return style_message(message, S_ATTENTION)


def s_emph(message):
    return style_message(message, S_EMPH)


def style(header, content, level=0, new_line=False, header_style=S_HEADER):
    new_line = "\n" if new_line else ""
    level = ("  " * level) if level else ""
    return new_line + level + style_message(str(header), header_style) \
        + ((" " + str(content)) if content else "")


def h_print(header, content="", level=0, new_line=False, err=False):
    prints(style(header, content, level, new_line, S_HEADER), err=err)


def a_print(header, content="", level=0, new_line=False, err=False):
    prints(style(header, content, level, new_line, S_ATTENTION), err=err)
