"""
The MODEL layer contains pure data structures: the glyph set, the color cycle,
the column grid and the drop positions.
It has NO knowledge of the GUI (Qt); it only needs NumPy.
"""
