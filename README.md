# quadarm

Building blocks for controlling a robot with four branches. Each branch has six arm joints and ends in a gripper. The package does no I/O of its own. Devices, services and message publishing are all passed in as plain Python objects and callables.

## Modules

### `quadarm.filters`

- `LowPassFilter(fc, ts)`
  - A first-order low-pass filter.
  - `filter(value)` returns the filtered value; the first sample passes through unchanged.
  - `set_params(fc, ts)` changes the cut-off frequency and sample time.
- `RampTrajectory(dt)`
  - A constant-slope ramp.
  - `set_target(y_des, time_to_reach)` and `set_target_step(y_des, delta_y)` set the target.
  - `step()` advances the ramp and snaps onto the target when it is close.
  - `reached()` and `reset(y_out)` check and reset the ramp.
- `Bezier1D(points)` with `evaluate(s)`.
- `factorial` and `nchoosek`.

### `quadarm.rotations`

- Rotation matrices: `rot_x`, `rot_y`, `rot_z`, and `skew` for cross-product matrices.
- Euler angles in `Rz·Ry·Rx` order: `euler_to_rotation` and `rotation_to_euler`.
- Quaternions in `(w, x, y, z)` order:
  - `rotation_to_quaternion`, `quaternion_to_rotation` and `euler_to_quaternion`.
  - `quaternion_to_axis_angle`.
  - `integrate_quaternion`.
- `diff_rotation` gives the orientation error vector between two rotations.
- Pseudo-inverses:
  - `pseudo_inverse_svd`
  - `pseudo_inverse_right`
  - `pseudo_inverse_right_weighted`
  - `dyn_pseudo_inverse`
- Scalar helpers: `ramp`, `clamp` and `sign`.

### `quadarm.ikfast`

Containers for analytic IK results:

- `SingleDofSolution` holds the result for one joint.
- `IkSolution` provides:
  - `solution(free_values)`, which returns concrete joint values and wraps free joints into `[-pi, pi]`.
  - `dof()`.
  - `validate()`, which raises `ValueError` on an inconsistent entry.
  - `solution_indices()`.
- `IkSolutionList` provides `add`, indexing, `len`, iteration and `clear`.

### `quadarm.joints`

- `JointId` indexes the 41-joint state used for visualisation. `JOINT_NAMES` holds the joint names.
- `PlanningJoint` indexes the 24-angle planned vector.
- `JointState`
  - Starts in the assembled pose.
  - `update_from_motor_state(data)` fills it from a flat 28-value motor state. A finger joint gets `1 - gripper opening`.
  - `as_dict()` returns the joints by name.
- `base_transform(position, orientation)` describes the `world` → `base_link` transform. The quaternion is in `(x, y, z, w)` order.

### `quadarm.gripper`

- Frame functions:
  - `encode_command` builds the 8-byte command frame from fractions in `[0, 1]`.
  - `format_frame` renders bytes as hex text.
  - `parse_status_frame` returns the position in `[0, 1]`.
- `branch_for_id` maps a CAN id to its branch.
- `Gripper(transport, send_id)`
  - `control(...)` sends one command and returns the position the gripper reports.
  - `transport` is any object with `send(send_id, frame_text)` and `receive() -> bytes`.
- `GripperBank(grippers)`
  - `command(positions)` drives every gripper at full speed and force.
- Failures raise `GripperError`.

### `quadarm.motors`

- Unit conversion: `joint_to_actuator` and `actuator_to_joint` convert between joint radians and actuator revolutions. They apply the gear ratio, sign and offset of each motor.
- `branch_range` and `find_motor` locate actuators by id.
- `MotorGroup(controller)` works through an actuator controller object:
  - `connect()`
  - `set_branch_enabled` and `set_enabled`
  - `set_position_mode()`
  - `send_receive()` and `receive()`
- Commanded angles are kept in `q_send` and measured angles in `q_recv`.
- Failures raise `MotorError`.

### `quadarm.tf_yaml`

Quaternions here are in `(x, y, z, w)` order.

- `transform_matrix(translation, quaternion)` builds a 4×4 transform.
- `save_target_poses(path, left, right)` overwrites a file with `target_pose_R` and `target_pose_L`.
- `save_named_transform(path, transform, name)` updates one named entry and keeps the others.
- `quaternion_to_rpy` and `describe_transform` give a readable report.

### `quadarm.control`

`RobotController` is a state machine. Each call to `step()` runs one cycle, selected by the control flag (`set_mode`). The modes are listed in `ControlMode`:

- read state;
- move to the initial pose over `HOME_STEPS` steps;
- request a plan, then load it with `load_planning_result` and play it point by point;
- two gripper presets.

Other parts of the module:

- `on_gripper_state` stores measured gripper openings.
- `interpolate` and `flatten_state` are the helpers the loop uses.
- A planning result file is YAML with `joint_angle_sequence` and `floating_base_sequence` lists.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

```python
from quadarm.filters import LowPassFilter, RampTrajectory, Bezier1D

lpf = LowPassFilter(fc=10.0, ts=0.005)
smoothed = [lpf.filter(v) for v in (0.0, 1.0, 1.0, 1.0)]

ramp = RampTrajectory(dt=0.01)
ramp.set_target(1.0, time_to_reach=0.5)
while not ramp.reached():
    ramp.step()

Bezier1D([0.0, 0.5, 1.0]).evaluate(0.5)
```

```python
from quadarm.rotations import euler_to_rotation, rotation_to_euler

rotation_to_euler(euler_to_rotation(0.1, 0.2, 0.3))   # array([0.1, 0.2, 0.3])
```

```python
from quadarm.gripper import encode_command, format_frame

format_frame(encode_command(1.0, 1.0, 1.0, 1.0, 1.0))  # "00 FF FF FF FF FF 00 00"
```

```python
from quadarm.tf_yaml import transform_matrix, save_named_transform

t = transform_matrix([0.1, 0.2, 0.3], [0.0, 0.0, 0.0, 1.0])
save_named_transform("tf_using.yaml", t, "tf_mat_world_flan1")
```

## What the package does not do

The package does not do any of the following:

- It has no command-line programs and no long-running node.
- It does not open serial ports.
- It does not talk to an actuator SDK.
- It does not listen for frame transforms.
- It does not subscribe to or publish on any messaging system.
- It does not compute motion plans or base-link poses. `RobotController` asks the planner object it is given, and reads the result file that planner writes.

The loop rate (`LOOP_RATE_HZ`) is the rate `step()` is meant to be called at. Timing the loop is left to the caller.