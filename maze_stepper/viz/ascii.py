from typing import List
from maze_stepper.core.grid import Grid

def render_lines(grid: Grid, mark=None) -> List[str]:
    """
    Draws the grid as text, one '+---+' row of corners and one '|   |' row
    of cells per grid row. Walls come straight from the wall bits, so an
    unfinished maze renders with its uncarved region still boxed in.
    'mark' is an optional (x, y) drawn as '@'.
    """
    lines = ['+' + '---+' * grid.width]

    for y in range(grid.height):
        row = '|'
        floor = '+'
        for x in range(grid.width):
            body = ' @ ' if mark == (x, y) else '   '
            row += body + ('|' if grid.has_wall(x, y, Grid.EAST) else ' ')
            floor += ('---' if grid.has_wall(x, y, Grid.SOUTH) else '   ') + '+'
        lines.append(row)
        lines.append(floor)

    return lines

def render_ascii(grid: Grid, mark=None) -> str:
    return "\n".join(render_lines(grid, mark))
