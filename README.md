# quadwalk

A small pure-Python library for simulating and controlling a four-legged
walking robot with three-joint legs. It has no dependencies outside the
standard library.

## Modules

- `quadwalk.vector`: immutable `Vec2` and `Vec3` with `+`, `-`, scalar `*`,
  `rotate`, `angle`, `length` (2-D) and negation, `cross`, `dot`, `length`,
  `normalized` (3-D). Helpers: `rodrigues_rp`, `saturate`, `sign`,
  `deg_to_rad`, `rad_to_deg`.
- `quadwalk.leg`: `Leg` holds link lengths, servo calibration (pulse width at
  0° and 90° per joint), posture directions and the foot's position, velocity
  and acceleration. `integrate()` advances the foot by one 10 ms step (and
  stops it if it would leave the leg's reach); `apply_inverse_kinematics()`
  solves the joint angles, raising `ValueError` for an unreachable position.
  `pulse_widths()` gives the servo compare values; an optional `on_pulse`
  callback receives each joint's `PwmKey` and value whenever angles are set.
- `quadwalk.sensors`: `Gyro` decodes 8-byte frames (two sync bytes of 100,
  then roll, pitch and yaw as flag/value pairs) and smooths them over the
  last five frames with `median_filter`. `read_pixy(read_byte)` reads one
  camera vector packet from a byte-reading callable and returns a
  `PixyVector`.
- `quadwalk.body`: `Body` holds four calibrated legs (numbered 1 to 4; 1 and
  2 on the left, 3 and 4 on the right) and the body's own motion. It gives
  foot points, the centre of gravity, rotation radii and the gravity moment
  about an axis through two feet, and `move()` advances everything by one
  control period and drives the legs.
- `quadwalk.console`: `xformat` (a compact printf dialect: `%s %c %b %o %d
  %u %x %X`, `0`/`-` flags, width, `l` prefix, 32-bit integers),
  `dump_line` for hex dumps, `parse_int` for decimal, `0x`, `0b` and octal
  numbers, and `Console`, which writes through a callable (CR LF line ends by
  default) and reads CR-terminated lines with `gets`.
- `quadwalk.walk`: `Gait` (`CRAWL`, `TROT`, `STABLE`) and `Walker`, which
  sequences lifted legs, computes swing-leg paths, and runs a state-feedback
  balance controller about the diagonal support axes.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from quadwalk.body import Body
from quadwalk.walk import Gait, Walker

pulses = []
body = Body(on_pulse=lambda key, width: pulses.append((key, width)))
body.set_leg_position(1, 0.0, 0.07, -0.25)
body.set_leg_position(2, 0.0, 0.07, -0.25)
body.set_leg_position(3, 0.0, -0.07, -0.25)
body.set_leg_position(4, 0.0, -0.07, -0.25)
body.move()

walker = Walker(body, Gait.TROT)
walker.start()
walker.start_balance_control()

for _ in range(20):
    walker.tick()
    walker.control_balance(roll=0.0, pitch=0.0)
    body.move()

print(body.leg_position(1), body.leg_angle(1, 0), pulses[-1])
```

Each control step covers 10 ms of simulated time.

Sensors and console:

```python
from quadwalk.sensors import Gyro
from quadwalk.console import xformat, parse_int

gyro = Gyro()
attitude = gyro.prime([100, 100, 0, 10, 0, 20, 0, 5])
print(attitude.roll, attitude.pitch, attitude.yaw)  # radians; pitch has a 17° offset removed

print(xformat("%6d,%3d%%", -200, 5))  # "  -200,  5%"
print(parse_int("0x3ff rest"))        # (1023, " rest")
```

## What it does not do

The package talks to no hardware. Servo outputs go only to the `on_pulse`
callback, gyro frames must be handed to `Gyro.update` as byte sequences,
camera bytes come from the callable given to `read_pixy`, and `Console`
writes to whatever callable it is given (standard output by default). There
is no serial-port access, no real-time loop and no command-line program; the
caller drives the control loop as in the example above.