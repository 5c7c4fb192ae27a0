"""Moody's published worksheet readings for a 48 x 72 in. plate.

Moody's paper titles the worksheets "48 x 78-Inch", but the diagonal stations
(3 in. to 83 in.) only fit a 48 x 72 in. plate, a US standard size with an
86.5 in. diagonal. Readings are in arc-seconds; the paper tabulates tenths of
an arc-second.
"""

from .models import PlateDimensions, PlateReadings

MOODY_PLATE = PlateDimensions(
    height_inches=48,
    width_inches=72,
    reflector_foot_spacing_inches=4,
)

MOODY_READINGS = PlateReadings(
    top_starting_diagonal=[
        6.5, 6.0, 5.0, 5.2, 5.5, 5.6, 5.5, 5.0, 5.5, 4.8,
        5.0, 5.2, 5.3, 4.9, 4.6, 4.2, 5.3, 4.9, 4.5, 3.5,
    ],
    bottom_starting_diagonal=[
        6.6, 5.4, 5.4, 5.2, 5.5, 5.7, 5.0, 5.0, 5.4, 4.5,
        4.4, 4.5, 4.5, 4.8, 4.2, 4.2, 4.2, 4.8, 4.3, 3.2,
    ],
    north_perimeter=[
        20.5, 19.7, 20.5, 20.3, 20.2, 19.9, 19.0, 19.5,
        18.8, 18.6, 18.7, 18.6, 18.4, 18.5, 19.0, 17.9,
    ],
    east_perimeter=[3.5, 2.1, 2.5, 2.8, 3.4, 3.2, 3.5, 4.0, 4.2, 3.5],
    south_perimeter=[
        16.4, 15.0, 15.6, 15.5, 15.1, 15.3, 15.1, 14.6,
        14.0, 13.5, 13.5, 13.3, 13.3, 13.4, 14.0, 13.9,
    ],
    west_perimeter=[6.0, 4.6, 4.5, 4.7, 5.0, 4.5, 5.9, 6.0, 6.0, 4.9],
    horizontal_center=[
        11.7, 12.4, 12.1, 12.5, 12.0, 11.5, 11.5, 11.3,
        11.3, 10.3, 10.8, 10.3, 10.0, 10.7, 10.4, 10.4,
    ],
    vertical_center=[6.6, 6.4, 6.3, 6.5, 6.6, 6.9, 7.5, 7.4, 7.1, 7.0],
)
