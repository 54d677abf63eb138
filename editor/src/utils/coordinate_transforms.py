"""Coordinate transformation utilities for the isometric grid.

Provides conversion between different coordinate systems:
- Grid cells (integer gx, gy)
- Isometric screen pixels (2:1 diamonds, Y-down)
- Normalized diamond quad (0-1 range, north vertex at (0.5, 0))
"""

import math


def grid_to_isometric(grid_x, grid_y, diamond_width):
	"""Convert a grid cell to the isometric pixel position of its center.

	Args:
		grid_x: Grid column
		grid_y: Grid row
		diamond_width: Width of one diamond in pixels (height is half of it)

	Returns:
		(iso_x, iso_y): Screen pixels relative to the grid origin
	"""
	iso_x = (grid_x - grid_y) * (diamond_width / 2)
	iso_y = (grid_x + grid_y) * (diamond_width / 4)
	return iso_x, iso_y


def isometric_to_grid(iso_x, iso_y, diamond_width):
	"""Convert isometric pixels to the nearest grid cell.

	Args:
		iso_x: Screen X relative to the grid origin
		iso_y: Screen Y relative to the grid origin
		diamond_width: Width of one diamond in pixels

	Returns:
		(grid_x, grid_y): Integer grid cell
	"""
	half_width = diamond_width / 2
	half_height = diamond_width / 4
	grid_x = (iso_x / half_width + iso_y / half_height) / 2
	grid_y = (iso_y / half_height - iso_x / half_width) / 2
	return math.floor(grid_x + 0.5), math.floor(grid_y + 0.5)


def diamond_corners(center_x, center_y, diamond_width, stroke_offset=0):
	"""Get the four vertices of a diamond centered at (center_x, center_y).

	Args:
		center_x: Diamond center X
		center_y: Diamond center Y
		diamond_width: Width of the diamond in pixels
		stroke_offset: Extra pixels added to every half extent (for outlines)

	Returns:
		dict with 'north', 'east', 'south', 'west' (x, y) tuples
	"""
	half_width = diamond_width / 2 + stroke_offset
	half_height = diamond_width / 4 + stroke_offset
	return {
		'north': (center_x, center_y - half_height),
		'east': (center_x + half_width, center_y),
		'south': (center_x, center_y + half_height),
		'west': (center_x - half_width, center_y),
	}


def grid_point_to_pixel_offset(point_x, point_y, diamond_width, zoom=1.0):
	"""Convert a normalized grid anchor point to a pixel offset from the cell center.

	The diamond's bounding quad is diamond_width wide and diamond_width / 2 tall.

	Args:
		point_x: Normalized X within the diamond quad (0.5 = center)
		point_y: Normalized Y within the diamond quad (0.5 = center)
		diamond_width: Width of the diamond in pixels
		zoom: Current view zoom

	Returns:
		(offset_x, offset_y): Pixels from the cell center
	"""
	offset_x = (point_x - 0.5) * diamond_width * zoom
	offset_y = (point_y - 0.5) * (diamond_width / 2) * zoom
	return offset_x, offset_y
