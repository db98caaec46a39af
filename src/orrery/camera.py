'''Adaptive camera controller.

Maps a focus target plus zoom intents onto a camera pose and clip planes that
stay usable from meters to hundreds of gigameters. All quantities are scene
units (gigameters with the default SCALE_FACTOR) and the reference plane is
XY, so "height" is the z component.

The controller is an owned object: callers hold a reference and issue
intents (change_focus, set_mode, reset_view, zoom_in, zoom_out, stop_zoom);
the render loop calls update(dt) once per frame and reads back an immutable
CameraState.'''

import warnings
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Union

import numpy as np
from .bodies import BodyKind
from .config import OrreryConfig, config as global_config

# zoom speed factor vs log10(distance): fast (relative) close in, slow far out
_ZOOM_LOG_DISTANCE = np.array([-2.5, -1.5, -0.5, 0.5, 1.5])
_ZOOM_FACTOR = np.array([0.5, 0.4, 0.3, 0.2, 0.1])

# log10(near / distance) vs log10(distance)
_NEAR_LOG_DISTANCE = np.array([-1.5, -0.5, 0.5, 1.5])
_NEAR_LOG_RATIO = np.array([-5.0, -4.0, -3.0, -2.0])

# orbit standoff multiplier per kind, applied on top of 5 radii
_ORBIT_STANDOFF = {
    BodyKind.STAR: 2.0,
    BodyKind.PLANET: 1.5,
    BodyKind.MOON: 1.2,
}
_ORBIT_RADII = 5.0
# near plane never reaches past this fraction of the focus distance
_NEAR_MAX_FRACTION = 0.5
_FIRST_PERSON_RADII = 1.1


class NumericDegeneracyError(ValueError):
    """A NaN, infinite or non-positive quantity reached the camera."""


class DegenerateCameraInputWarning(RuntimeWarning):
    """The camera ignored a degenerate input and kept its last valid state."""


class CameraMode(Enum):
    OVERVIEW = 'overview'
    ORBIT = 'orbit'
    FIRST_PERSON = 'first_person'

    @classmethod
    def for_kind(cls, kind: BodyKind) -> "CameraMode":
        """Mode selected automatically when a body of this kind gets focus."""
        kind = BodyKind.parse(kind)
        if kind is BodyKind.STAR:
            return cls.OVERVIEW
        if kind in (BodyKind.PLANET, BodyKind.MOON):
            return cls.ORBIT
        return cls.FIRST_PERSON


class ZoomIntent(Enum):
    IN = 'in'
    OUT = 'out'
    NONE = 'none'


@dataclass(frozen=True)
class FocusTarget:
    """
    What the camera should frame.

    Attributes
    ----------
    position : np.ndarray
        Target position [scene units]
    kind : BodyKind
        Selects the camera mode and standoff
    radius : float
        Target radius [scene units]
    name : str
        Body name, reported through on_focus_change
    """
    position: np.ndarray
    kind: BodyKind
    radius: float
    name: str

    def __post_init__(self):
        position = np.array(self.position, dtype=float).reshape(-1)
        position.flags.writeable = False
        object.__setattr__(self, 'position', position)
        object.__setattr__(self, 'kind', BodyKind.parse(self.kind))
        object.__setattr__(self, 'radius', float(self.radius))

    def is_degenerate(self) -> bool:
        """True if the position is not a finite 3-vector or the radius is not positive."""
        return (self.position.shape != (3,) or
                not np.all(np.isfinite(self.position)) or
                not np.isfinite(self.radius) or
                self.radius <= 0)

    def moved_to(self, position) -> "FocusTarget":
        return FocusTarget(position, self.kind, self.radius, self.name)


def validate_focus_target(target: FocusTarget) -> FocusTarget:
    """
    Strict check of a focus target.

    Raises
    ------
    NumericDegeneracyError
        If the target's position or radius is degenerate
    """
    if target.is_degenerate():
        raise NumericDegeneracyError(
            f"Degenerate focus target '{target.name}': position="
            f"{target.position.tolist()}, radius={target.radius}")
    return target


@dataclass(frozen=True)
class CameraEvent:
    """Structured notification passed to the on_event hook."""
    kind: str
    message: str
    details: dict = field(default_factory=dict)


@dataclass(frozen=True)
class CameraState:
    """
    Read-only camera snapshot for the rendering collaborator.

    distance_to_focus is measured from the point being looked at: the focus
    in orbit and first-person modes, the system origin in overview.
    """
    mode: CameraMode
    position: np.ndarray
    look_at: np.ndarray
    near: float
    far: float
    is_transitioning: bool
    transition_progress: float
    zoom_intent: ZoomIntent
    focus_name: Optional[str]
    distance_to_focus: float


# ========== SCALE-ADAPTIVE FUNCTIONS ==========
def ease_in_out_cubic(t: float) -> float:
    """Cubic ease-in-out on [0, 1]."""
    t = min(max(t, 0.0), 1.0)
    if t < 0.5:
        return 4 * t**3
    return 1 - (-2*t + 2)**3 / 2


def zoom_step(distance: float, dt: float,
              config: Optional[OrreryConfig] = None) -> float:
    """
    Zoom step for one frame [scene units].

    base_speed * dt * distance * k(distance), with k interpolated in
    log10(distance) from 0.5 close in to 0.1 far out. The product grows
    monotonically with distance; the result is clamped to
    [ZOOM_MIN_STEP, ZOOM_MAX_STEP].
    """
    cfg = config or global_config
    if dt <= 0:
        return 0.0
    log_d = np.log10(max(distance, 1e-12))
    k = float(np.interp(log_d, _ZOOM_LOG_DISTANCE, _ZOOM_FACTOR))
    step = cfg.ZOOM_BASE_SPEED * dt * distance * k
    return float(np.clip(step, cfg.ZOOM_MIN_STEP, cfg.ZOOM_MAX_STEP))


def clip_planes(distance: float,
                config: Optional[OrreryConfig] = None) -> tuple[float, float]:
    """
    Near and far clip distances for a camera ``distance`` from its focus.

    Near is a distance-dependent fraction of the distance (1e-5 close in up
    to 1e-2 far out) with an absolute floor, and always stays in front of
    the focus. Far is the largest of its floor,
    a multiple of the distance, and (blended in as the camera pulls back past
    1 scene unit) enough to contain the whole system.

    Returns
    -------
    tuple of float
        (near, far), always finite with 0 < near < distance < far
    """
    cfg = config or global_config
    d = max(float(distance), 1e-12)
    log_d = np.log10(d)
    ratio = 10.0 ** np.interp(log_d, _NEAR_LOG_DISTANCE, _NEAR_LOG_RATIO)
    near = min(max(d * ratio, cfg.NEAR_PLANE_FLOOR), _NEAR_MAX_FRACTION * d)
    weight = float(np.clip(log_d, 0.0, 1.0))
    far = max(cfg.FAR_PLANE_FLOOR,
              cfg.FAR_PLANE_DISTANCE_MULTIPLE * d,
              weight * (d + cfg.SYSTEM_EXTENT))
    return float(near), float(far)


# ========== CONTROLLER ==========
class CameraController:
    """
    Camera state machine with eased transitions and scale-adaptive zoom.

    Parameters
    ----------
    config : OrreryConfig, optional
        Camera constants (global config when omitted)
    on_focus_change : callable, optional
        Called with the new focus name (or None) on every selection change
    on_event : callable, optional
        Called with a CameraEvent for transitions and ignored inputs

    Examples
    --------
    >>> camera = CameraController()
    >>> camera.change_focus(system.focus_target_for('Stanton2', hours))
    >>> state = camera.update(1 / 60)
    >>> state.mode
    <CameraMode.ORBIT: 'orbit'>
    """
    def __init__(self, config: Optional[OrreryConfig] = None,
                 on_focus_change: Optional[Callable[[Optional[str]], None]] = None,
                 on_event: Optional[Callable[[CameraEvent], None]] = None):
        self._config = config or global_config
        self._on_focus_change = on_focus_change
        self._on_event = on_event

        self._mode = CameraMode.OVERVIEW
        self._focus: Optional[FocusTarget] = None
        self._zoom = ZoomIntent.NONE

        self._position, self._look_at = self._framing()
        self._offset = self._position - self._look_at

        self._transitioning = False
        self._elapsed = 0.0
        self._duration = 0.0
        self._from_position = self._position.copy()
        self._from_look_at = self._look_at.copy()

        self._state = self._snapshot()

    # ========== PROPERTIES ==========
    @property
    def state(self) -> CameraState:
        """State produced by the most recent update (or construction)."""
        return self._state

    @property
    def mode(self) -> CameraMode:
        return self._mode

    @property
    def focus(self) -> Optional[FocusTarget]:
        return self._focus

    @property
    def is_transitioning(self) -> bool:
        return self._transitioning

    # ========== INTENTS ==========
    def change_focus(self, target: Optional[FocusTarget],
                     transition_time: Optional[float] = None) -> bool:
        """
        Focus a new target, switching mode by its kind.

        Passing None is the same as reset_view(). A degenerate target is
        ignored (the camera keeps its state) and False is returned.
        """
        if target is None:
            self.reset_view()
            return True
        if target.is_degenerate():
            self._degenerate("focus target", name=target.name,
                             position=target.position.tolist(), radius=target.radius)
            return False
        self._focus = target
        self._mode = CameraMode.for_kind(target.kind)
        self._zoom = ZoomIntent.NONE
        self._start_transition(transition_time)
        self._notify_focus(target.name)
        return True

    def set_mode(self, mode: Union[CameraMode, str]) -> bool:
        """
        Switch mode without changing focus.

        Orbit and first-person modes need a focus; without one the intent is
        ignored and False is returned.
        """
        mode = CameraMode(mode)
        if mode is not CameraMode.OVERVIEW and self._focus is None:
            self._emit('ignored_intent', f"Mode {mode.value} needs a focus target",
                       mode=mode.value)
            return False
        self._mode = mode
        self._start_transition(None)
        return True

    def reset_view(self):
        """Clear focus and return to the overview shot."""
        had_focus = self._focus is not None
        self._focus = None
        self._mode = CameraMode.OVERVIEW
        self._zoom = ZoomIntent.NONE
        self._start_transition(None)
        if had_focus:
            self._notify_focus(None)

    def zoom_in(self):
        self._zoom = ZoomIntent.IN

    def zoom_out(self):
        self._zoom = ZoomIntent.OUT

    def stop_zoom(self):
        self._zoom = ZoomIntent.NONE

    def track_focus(self, position) -> bool:
        """
        Move the focused target (e.g. a planet advancing along its orbit).

        The camera keeps its offset from the target. Returns False if there
        is no focus or the position is degenerate.
        """
        if self._focus is None:
            return False
        moved = self._focus.moved_to(position)
        if moved.is_degenerate():
            self._degenerate("focus position", name=self._focus.name,
                             position=moved.position.tolist())
            return False
        self._focus = moved
        return True

    # ========== FRAME UPDATE ==========
    def update(self, dt: float) -> CameraState:
        """
        Advance the camera by one frame of dt seconds.

        A non-finite or negative dt is ignored and the previous state is
        returned unchanged.
        """
        if not np.isfinite(dt) or dt < 0:
            self._degenerate("frame time", dt=dt)
            return self._state

        if self._transitioning:
            self._advance_transition(dt)
        else:
            self._look_at = self._anchor()
            if self._zoom is not ZoomIntent.NONE:
                self._apply_zoom(dt)
            self._position = self._look_at + self._offset
            self._apply_floors()
            self._offset = self._position - self._look_at

        if self._transitioning:
            # floor only; the offset is still being interpolated
            self._apply_floors()
        self._state = self._snapshot()
        return self._state

    # ========== INTERNALS ==========
    def _anchor(self) -> np.ndarray:
        """Point the camera looks at: the origin in overview, else the focus."""
        if self._focus is None or self._mode is CameraMode.OVERVIEW:
            return np.zeros(3)
        return np.array(self._focus.position, dtype=float)

    def _framing(self) -> tuple[np.ndarray, np.ndarray]:
        """Target (position, look_at) for the current mode and focus."""
        look_at = self._anchor()
        if self._mode is CameraMode.OVERVIEW or self._focus is None:
            return np.array([0.0, 0.0, self._config.OVERVIEW_HEIGHT]), look_at
        radius = self._focus.radius
        if self._mode is CameraMode.ORBIT:
            d = radius * _ORBIT_RADII * _ORBIT_STANDOFF.get(self._focus.kind, 1.0)
            offset = np.array([d, d, 0.5 * d])
        else:
            d = radius * _FIRST_PERSON_RADII
            offset = np.array([d, 0.0, 0.1 * d])
        return look_at + offset, look_at

    def _start_transition(self, duration: Optional[float]):
        duration = self._config.TRANSITION_DURATION if duration is None else float(duration)
        self._from_position = self._position.copy()
        self._from_look_at = self._look_at.copy()
        self._elapsed = 0.0
        self._duration = duration
        if duration > 0:
            self._transitioning = True
            self._emit('transition_started', f"Transition to {self._mode.value}",
                       mode=self._mode.value, duration=duration,
                       focus=None if self._focus is None else self._focus.name)
        else:
            self._transitioning = False
            self._position, self._look_at = self._framing()
            self._offset = self._position - self._look_at

    def _advance_transition(self, dt: float):
        self._elapsed += dt
        progress = min(self._elapsed / self._duration, 1.0)
        eased = ease_in_out_cubic(progress)
        # target is recomputed each frame so a moving focus is followed
        end_position, end_look_at = self._framing()
        self._position = self._from_position + (end_position - self._from_position) * eased
        self._look_at = self._from_look_at + (end_look_at - self._from_look_at) * eased
        if progress >= 1.0:
            self._transitioning = False
            self._position, self._look_at = end_position, end_look_at
            self._offset = self._position - self._look_at
            self._emit('transition_finished', f"Arrived in {self._mode.value}",
                       mode=self._mode.value)

    def _apply_zoom(self, dt: float):
        distance = float(np.linalg.norm(self._offset))
        if distance <= 0:
            return
        step = zoom_step(distance, dt, self._config)
        if self._zoom is ZoomIntent.IN:
            new_distance = max(distance - step, self._min_distance())
            new_distance = min(new_distance, distance)
        else:
            new_distance = distance + step
        self._offset = self._offset * (new_distance / distance)

    def _min_distance(self) -> float:
        if self._focus is None or self._mode is CameraMode.OVERVIEW:
            return 0.0
        return self._config.MIN_DISTANCE_FACTOR * self._focus.radius

    def _apply_floors(self):
        floor = self._min_distance()
        if floor > 0:
            anchor = self._anchor()
            away = self._position - anchor
            distance = float(np.linalg.norm(away))
            if distance < floor:
                if distance > 0:
                    direction = away / distance
                else:
                    framed, look_at = self._framing()
                    direction = (framed - look_at) / np.linalg.norm(framed - look_at)
                self._position = anchor + direction * floor
        if self._mode is CameraMode.OVERVIEW and not self._transitioning:
            if self._position[2] < self._config.OVERVIEW_MIN_HEIGHT:
                self._position = self._position.copy()
                self._position[2] = self._config.OVERVIEW_MIN_HEIGHT

    def _distance_to_focus(self) -> float:
        return float(np.linalg.norm(self._position - self._anchor()))

    def _snapshot(self) -> CameraState:
        distance = self._distance_to_focus()
        near, far = clip_planes(distance, self._config)
        position = self._position.copy()
        look_at = self._look_at.copy()
        position.flags.writeable = False
        look_at.flags.writeable = False
        if self._transitioning:
            progress = min(self._elapsed / self._duration, 1.0)
        else:
            progress = 1.0
        return CameraState(
            mode=self._mode,
            position=position,
            look_at=look_at,
            near=near,
            far=far,
            is_transitioning=self._transitioning,
            transition_progress=progress,
            zoom_intent=self._zoom,
            focus_name=None if self._focus is None else self._focus.name,
            distance_to_focus=distance,
        )

    def _notify_focus(self, name: Optional[str]):
        if self._on_focus_change is not None:
            self._on_focus_change(name)

    def _degenerate(self, what: str, **details):
        message = f"Ignoring degenerate {what}: {details}"
        warnings.warn(message, DegenerateCameraInputWarning, stacklevel=3)
        self._emit('degenerate_input', message, **details)

    def _emit(self, kind: str, message: str, **details):
        if self._on_event is not None:
            self._on_event(CameraEvent(kind, message, details))

    def __repr__(self):
        focus = None if self._focus is None else self._focus.name
        return f"CameraController(mode={self._mode.value}, focus={focus!r})"
