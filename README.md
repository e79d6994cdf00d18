# atlaskit

This package provides small building blocks for tools that lay out glyphs and
edit text. It has no dependencies outside the standard library.

- **`atlaskit.rectpack`** is a skyline rectangle packer for texture atlases. It offers
  bottom-left and best-fit heuristics.
- **`atlaskit.layout`**, **`atlaskit.undo`** and **`atlaskit.textedit`** hold the logic
  behind a single-line or multi-line text field: cursor and selection handling, keyboard
  navigation, mouse clicks and drags, and a bounded undo/redo history.
- **`atlaskit.profiling`** provides millisecond timers and running averages for timing
  named stages of a pipeline.

## Installation

```
pip install atlaskit
```

To run the test suite:

```
pip install "atlaskit[test]"
pytest
```

## Packing rectangles

```python
from atlaskit.rectpack import Packer, Rect, Heuristic

packer = Packer(width=256, height=256, num_nodes=256)
packer.set_heuristic(Heuristic.SKYLINE_BF_SORT_HEIGHT)

rects = [Rect(id=i, w=w, h=h) for i, (w, h) in enumerate([(64, 32), (100, 100), (16, 16)])]
all_packed = packer.pack(rects)

for r in rects:
    print(r.id, r.x, r.y, r.was_packed)
```

`pack` places the tallest rectangles first and updates every `Rect` in place.

- A rectangle that fits gets its `x` and `y` set and `was_packed` set to `True`.
- A rectangle that does not fit gets `x == y == MAX_VALUE` and `was_packed` set to `False`.
- An empty rectangle, with zero width or zero height, is placed at the origin.

`pack` returns `True` only when every rectangle was placed. You can call `pack` again on
the same packer to keep filling the same target.

By default, widths are rounded up so that the packer never runs out of its `num_nodes`
skyline segments. Call `allow_out_of_mem(True)` to turn off this rounding. Packing is then
tighter, but a rectangle can fail to pack once the segments run out.

`set_heuristic` raises `ValueError` for an unknown heuristic.

## Editing text

```python
from atlaskit.layout import PlainTextBuffer
from atlaskit.textedit import TextEditState, Key

text = PlainTextBuffer("hello\nworld", char_width=8.0, line_height=16.0)
state = TextEditState(single_line=False)

state.key(text, Key.TEXTEND)
state.key(text, "!")
state.key(text, Key.UNDO)
state.click(text, x=20.0, y=4.0)
state.key(text, Key.DOWN | Key.SHIFT)
state.cut(text)
state.paste(text, "X")
print(str(text), state.cursor)
```

`TextEditState.key` accepts three kinds of key:

- a single character to type;
- an integer character code below `KEY_BASE`;
- a `Key` value, which you can combine with `Key.SHIFT` to extend the selection.

The keys cover arrows, page up and page down, line and text start and end, word
movement, delete and backspace, insert mode, undo and redo. `Key.PGUP` and `Key.PGDOWN`
move `row_count_per_page` rows. In single-line mode, up and down act like left and right,
and newlines are not typed.

`PlainTextBuffer` is a monospaced buffer in which every newline ends a row. For any other
layout, subclass `atlaskit.layout.TextBuffer` and supply these methods:

- `__len__`
- `char_at`
- `layout_row`
- `char_width_at`
- `delete`
- `insert`

`atlaskit.layout` also provides `locate_coord` and `find_charpos`. `locate_coord` finds
the character nearest a point. `find_charpos` returns the position of a character and the
rows around it.

Undo history is kept in `atlaskit.undo.UndoState`. Its default capacity is 99 records and
999 stored characters. When the history is full, the oldest entries are dropped.

## Profiling

```python
from atlaskit.profiling import ProfileRegistry, ProfileHelper

registry = ProfileRegistry()

with registry.scope("shade"):
    ...

with ProfileHelper(registry, "intersect") as helper:
    for _ in range(4):
        helper.call(sum, range(1000))

print(registry["intersect"])  # "cur = ...ms\nave = ...ms"
```

`ProfileRegistry` creates a `ProfileData` for a key the first time you ask for it.
`ProfileData` keeps the latest measurement, the average of all measurements and the number
of measurements.

- `registry.scope(key)` times one block. It records the time even if the block raises.
- `ProfileHelper` adds up the duration of several `call`s, or of `begin`/`end` pairs. It
  records the total as one measurement when its `with` block exits.

A `Timer` measures wall-clock time with `time.perf_counter`. You can pass it another clock
instead. It raises `TimerError` in two cases: when you start it while it is already
running, and when you stop it without starting it first.

## What this package does not do

- It does not draw anything. There is no rendering of text fields, atlases or cursors, and
  no window or input handling. You pass mouse positions and key codes in yourself.
- It does not include a clipboard. To copy, read the selected range from your own buffer.
- Timing is CPU wall-clock only. The package has no GPU or device timers.