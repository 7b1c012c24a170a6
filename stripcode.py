import argparse
import sys
from collections import namedtuple

import numpy as np
from tqdm import tqdm

from stripcode_ecc import ecc_count_for, rs_encode

HEIGHT = 8
MAX_CHARS_PER_CHUNK = 40
MAX_SEQUENCES = 255  # Sequence id and total are each two nibbles

LEFT_FINDER_WIDTH = 3
QUIET_WIDTH = 1
META_WIDTH = 4
RIGHT_FINDER_WIDTH = 2

StripCodeLine = namedtuple(
    'StripCodeLine', ['grid', 'width', 'height', 'sequence_index', 'total_sequences'])


class InvalidSymbolError(ValueError):
    pass


def to_symbols(payload, encoding=None):
    """Turn a payload into a list of byte symbols.

    Text maps each character to its code point, so anything past U+00FF is
    rejected unless an encoding is given to turn the text into bytes first.
    """
    if isinstance(payload, str):
        if encoding:
            return list(payload.encode(encoding))
        symbols = []
        for pos, char in enumerate(payload):
            code = ord(char)
            if code > 255:
                raise InvalidSymbolError(
                    f"Character {char!r} (U+{code:04X}) at position {pos} does not fit in one byte")
            symbols.append(code)
        return symbols
    if isinstance(payload, (bytes, bytearray)):
        return list(payload)

    symbols = []
    for pos, value in enumerate(payload):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidSymbolError(f"Symbol at position {pos} is not an integer: {value!r}")
        if not 0 <= value <= 255:
            raise InvalidSymbolError(f"Symbol at position {pos} out of range 0-255: {value}")
        symbols.append(int(value))
    return symbols


def plan_chunks(payload):
    return [list(payload[i:i + MAX_CHARS_PER_CHUNK])
            for i in range(0, len(payload), MAX_CHARS_PER_CHUNK)]


def strip_width(data_len, ecc_len):
    return (LEFT_FINDER_WIDTH + QUIET_WIDTH + META_WIDTH + 2 * data_len + 2 * ecc_len
            + QUIET_WIDTH + RIGHT_FINDER_WIDTH)


def write_column(grid, x, value, is_meta):
    """Render one nibble into column x and return the next free column.

    Payload and ECC columns get a checkerboard mask on rows 1-6; metadata is
    written plain.
    """
    grid[0, x] = x % 2 == 0  # Top clock
    grid[HEIGHT - 1, x] = x % 2 != 0  # Bottom clock, phase shifted

    for b in range(4):
        pixel_on = (value >> b) & 1 == 1
        if not is_meta and (1 + b + x) % 2 == 0:
            pixel_on = not pixel_on
        grid[1 + b, x] = pixel_on

    parity = True
    if not is_meta and (5 + x) % 2 == 0:
        parity = not parity
    grid[5, x] = parity

    separator = False
    if not is_meta and (6 + x) % 2 == 0:
        separator = not separator
    grid[6, x] = separator

    return x + 1


def assemble_line(chunk, index, total):
    data_bytes = list(chunk)
    ecc_bytes = rs_encode(data_bytes, ecc_count_for(len(data_bytes)))

    width = strip_width(len(data_bytes), len(ecc_bytes))
    grid = np.zeros((HEIGHT, width), dtype=bool)
    x = 0

    # Left finder: solid caps, open center
    for i in range(LEFT_FINDER_WIDTH):
        for y in range(HEIGHT):
            grid[y, x + i] = y <= 2 or y >= 5
    x += LEFT_FINDER_WIDTH

    x += QUIET_WIDTH

    row_id = index + 1
    x = write_column(grid, x, row_id & 0x0F, True)
    x = write_column(grid, x, (row_id >> 4) & 0x0F, True)
    x = write_column(grid, x, total & 0x0F, True)
    x = write_column(grid, x, (total >> 4) & 0x0F, True)

    # ECC columns are rendered exactly like payload
    for val in data_bytes + ecc_bytes:
        x = write_column(grid, x, val & 0x0F, False)
        x = write_column(grid, x, (val >> 4) & 0x0F, False)

    x += QUIET_WIDTH

    # Right finder: center rows mark odd/even rows and the last row
    is_last_row = row_id == total
    is_even = row_id % 2 == 0
    if is_last_row:
        left_bit, right_bit = True, True
    elif is_even:
        left_bit, right_bit = True, False
    else:
        left_bit, right_bit = False, True

    for i in range(RIGHT_FINDER_WIDTH):
        center_val = left_bit if i == 0 else right_bit
        for y in range(HEIGHT):
            if y <= 1 or y >= 6:
                grid[y, x + i] = True
            elif y == 3 or y == 4:
                grid[y, x + i] = center_val

    grid.flags.writeable = False
    return StripCodeLine(grid, width, HEIGHT, row_id, total)


def generate_pattern(payload, encoding=None, progress=False):
    symbols = to_symbols(payload, encoding)
    chunks = plan_chunks(symbols)
    if len(chunks) > MAX_SEQUENCES:
        raise ValueError(
            f"Payload of {len(symbols)} symbols needs {len(chunks)} strips (max {MAX_SEQUENCES})")

    lines = []
    for index, chunk in enumerate(tqdm(chunks, desc="Encoding strips", disable=not progress)):
        lines.append(assemble_line(chunk, index, len(chunks)))
    return lines


def format_line(line, on='#', off='.'):
    return '\n'.join(''.join(on if pixel else off for pixel in row) for row in line.grid)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Encode text into StripCode strips and preview them as text.")
    parser.add_argument("text", nargs="?", help="Text to encode (read from stdin if omitted)")
    parser.add_argument("--utf8", action="store_true", help="Encode the text as UTF-8 bytes instead of one symbol per character")
    parser.add_argument("--on", default="#", help="Character for set pixels")
    parser.add_argument("--off", default=".", help="Character for clear pixels")
    parser.add_argument("--summary", action="store_true", help="Only print strip summaries, no preview")

    args = parser.parse_args(argv)

    if len(args.on) != 1 or len(args.off) != 1:
        parser.error("--on and --off must be single characters")

    text = args.text if args.text is not None else sys.stdin.read().rstrip("\n")
    try:
        symbols = to_symbols(text, "utf-8" if args.utf8 else None)
        lines = generate_pattern(symbols, progress=not args.summary)
    except ValueError as e:
        parser.error(str(e))

    if not lines:
        print("No data to encode")
        return

    for line, chunk in zip(lines, plan_chunks(symbols)):
        print(f"Strip {line.sequence_index}/{line.total_sequences}: width {line.width}, "
              f"data {len(chunk)} bytes, ecc {ecc_count_for(len(chunk))} bytes")
        if not args.summary:
            print(format_line(line, args.on, args.off))
            print()

    print(f"Generated {len(lines)} strip(s) from {len(symbols)} symbol(s)")


if __name__ == "__main__":
    main()
