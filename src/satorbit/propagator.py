"""SGP4/SDP4 orbit propagation.

Computes inertial (TEME) position and velocity from a TLE at any time
offset from its epoch. Near-Earth orbits (period under 225 minutes) use
SGP4 with atmospheric drag; longer periods add the SDP4 lunar, solar and
resonance terms from :mod:`satorbit.deep_space`.

All derived constants are computed once in the constructor. Each query is
an independent, pure function of the requested time, so a propagator can be
shared between threads without locking.

References:
    - Hoots, F.R. and Roehrich, R.L. "Spacetrack Report #3" (1980).
    - Vallado, D. et al. "Revisiting Spacetrack Report #3", AIAA 2006-6753.
"""

from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from .constants import (
    DEEP_SPACE_PERIOD_MIN,
    EPOCH_JAN0_00H_1950,
    MINUTES_PER_DAY,
    TWO_PI,
    WGS72,
    WGS72OLD,
    WGS84,
    EarthGravity,
)
from .coordinates import EciState
from .deep_space import DeepSpace
from .errors import ConvergenceWarning, DecayedOrbit, PropagationError
from .julian import Julian
from .tle_parser import OrbitalElements

logger = logging.getLogger(__name__)

X2O3 = 2.0 / 3.0
TEMP4 = 1.5e-12


# ── Configuration ──


@dataclass(frozen=True)
class PropagatorConfig:
    """Settings for :class:`SGP4Propagator`.

    Attributes:
        gravity: Earth gravity model. Element sets are fitted with WGS-72.
        kepler_tolerance: Newton step size (rad) below which Kepler's
            equation is considered solved.
        max_kepler_iterations: Iteration cap for the Kepler solve.
    """
    gravity: EarthGravity = field(default=WGS72)
    kepler_tolerance: float = 1.0e-6
    max_kepler_iterations: int = 10

    @classmethod
    def for_wgs84(cls) -> PropagatorConfig:
        """WGS-84 constants, for comparison with modern geodesy tools."""
        return cls(gravity=WGS84)

    @classmethod
    def for_wgs72old(cls) -> PropagatorConfig:
        """The original Spacetrack Report #3 constants."""
        return cls(gravity=WGS72OLD)


def solve_kepler(
    u: float,
    axnl: float,
    aynl: float,
    tolerance: float = 1.0e-6,
    max_iterations: int = 10,
) -> tuple[float, bool]:
    """Solve the modified Kepler equation for eccentric longitude.

    Newton iteration on ``E + aynl*cos(E) - axnl*sin(E) = u``, with each
    step clamped to 0.95 rad.

    Args:
        u: Mean longitude less node (rad).
        axnl: e·cos(ω) component.
        aynl: e·sin(ω) component, including long-period terms.
        tolerance: Stop once a Newton step is smaller than this (rad).
        max_iterations: Iteration cap.

    Returns:
        ``(eo1, converged)``. When the cap is hit the last iterate is
        returned with ``converged=False``.
    """
    eo1 = u
    for _ in range(max_iterations):
        sineo1 = math.sin(eo1)
        coseo1 = math.cos(eo1)
        tem5 = 1.0 - coseo1 * axnl - sineo1 * aynl
        tem5 = (u - aynl * coseo1 + axnl * sineo1 - eo1) / tem5
        if abs(tem5) >= 0.95:
            tem5 = math.copysign(0.95, tem5)
        eo1 += tem5
        if abs(tem5) < tolerance:
            return eo1, True
    return eo1, False


# ── Propagator ──


class SGP4Propagator:
    """SGP4/SDP4 propagator for one element set.

    Args:
        elements: Parsed TLE.
        config: Gravity model and Kepler settings. Defaults to WGS-72.

    Example:
        >>> prop = SGP4Propagator(OrbitalElements.parse(line1, line2))
        >>> state = prop.position_at(90.0)
        >>> state.position
        array([...])
    """

    def __init__(
        self,
        elements: OrbitalElements,
        config: Optional[PropagatorConfig] = None,
    ) -> None:
        self.elements = elements
        self.config = config or PropagatorConfig()
        grav = self.config.gravity
        self.gravity = grav

        xke = grav.xke
        j2 = grav.j2
        j3oj2 = grav.j3oj2
        radius = grav.radius

        # Elements in radians and radians/minute
        self.ecco = ecco = elements.eccentricity
        self.inclo = inclo = math.radians(elements.inclination)
        self.nodeo = math.radians(elements.raan)
        self.argpo = argpo = math.radians(elements.arg_perigee)
        self.mo = mo = math.radians(elements.mean_anomaly)
        self.bstar = bstar = elements.bstar
        no_kozai = elements.mean_motion * TWO_PI / MINUTES_PER_DAY

        eccsq = ecco * ecco
        omeosq = 1.0 - eccsq
        rteosq = math.sqrt(omeosq)
        cosio = math.cos(inclo)
        cosio2 = cosio * cosio

        # Recover the Brouwer mean motion from the Kozai value
        ak = (xke / no_kozai) ** X2O3
        d1 = 0.75 * j2 * (3.0 * cosio2 - 1.0) / (rteosq * omeosq)
        delta = d1 / (ak * ak)
        adel = ak * (1.0 - delta * delta - delta * (1.0 / 3.0 + 134.0 * delta * delta / 81.0))
        delta = d1 / (adel * adel)
        self.no = no = no_kozai / (1.0 + delta)

        ao = (xke / no) ** X2O3
        sinio = math.sin(inclo)
        po = ao * omeosq
        con42 = 1.0 - 5.0 * cosio2
        self.con41 = con41 = -con42 - cosio2 - cosio2
        posq = po * po
        rp = ao * (1.0 - ecco)

        self.semi_major_axis = ao * radius
        self.period = TWO_PI / no
        self.is_deep_space = self.period >= DEEP_SPACE_PERIOD_MIN

        # Atmosphere density parameters, adjusted for low perigee
        sfour = 78.0 / radius + 1.0
        qzms24 = ((120.0 - 78.0) / radius) ** 4
        perigee = (rp - 1.0) * radius
        self.isimp = rp < 220.0 / radius + 1.0
        if perigee < 156.0:
            sfour = perigee - 78.0
            if perigee < 98.0:
                sfour = 20.0
            qzms24 = ((120.0 - sfour) / radius) ** 4
            sfour = sfour / radius + 1.0

        pinvsq = 1.0 / posq
        tsi = 1.0 / (ao - sfour)
        self.eta = eta = ao * ecco * tsi
        etasq = eta * eta
        eeta = ecco * eta
        psisq = abs(1.0 - etasq)
        coef = qzms24 * tsi**4
        coef1 = coef / psisq**3.5
        cc2 = coef1 * no * (
            ao * (1.0 + 1.5 * etasq + eeta * (4.0 + etasq))
            + 0.375 * j2 * tsi / psisq * con41 * (8.0 + 3.0 * etasq * (8.0 + etasq))
        )
        self.cc1 = cc1 = bstar * cc2
        cc3 = 0.0
        if ecco > 1.0e-4:
            cc3 = -2.0 * coef * tsi * j3oj2 * no * sinio / ecco
        self.x1mth2 = x1mth2 = 1.0 - cosio2
        self.cc4 = 2.0 * no * coef1 * ao * omeosq * (
            eta * (2.0 + 0.5 * etasq)
            + ecco * (0.5 + 2.0 * etasq)
            - j2 * tsi / (ao * psisq) * (
                -3.0 * con41 * (1.0 - 2.0 * eeta + etasq * (1.5 - 0.5 * eeta))
                + 0.75 * x1mth2 * (2.0 * etasq - eeta * (1.0 + etasq)) * math.cos(2.0 * argpo)
            )
        )
        self.cc5 = 2.0 * coef1 * ao * omeosq * (1.0 + 2.75 * (etasq + eeta) + eeta * etasq)

        # Secular rates from J2 and J4
        cosio4 = cosio2 * cosio2
        temp1 = 1.5 * j2 * pinvsq * no
        temp2 = 0.5 * temp1 * j2 * pinvsq
        temp3 = -0.46875 * grav.j4 * pinvsq * pinvsq * no
        self.mdot = (
            no
            + 0.5 * temp1 * rteosq * con41
            + 0.0625 * temp2 * rteosq * (13.0 - 78.0 * cosio2 + 137.0 * cosio4)
        )
        self.argpdot = (
            -0.5 * temp1 * con42
            + 0.0625 * temp2 * (7.0 - 114.0 * cosio2 + 395.0 * cosio4)
            + temp3 * (3.0 - 36.0 * cosio2 + 49.0 * cosio4)
        )
        xhdot1 = -temp1 * cosio
        self.nodedot = xhdot1 + (
            0.5 * temp2 * (4.0 - 19.0 * cosio2) + 2.0 * temp3 * (3.0 - 7.0 * cosio2)
        ) * cosio

        self.omgcof = bstar * cc3 * math.cos(argpo)
        self.xmcof = -X2O3 * coef * bstar / eeta if ecco > 1.0e-4 else 0.0
        self.nodecf = 3.5 * omeosq * xhdot1 * cc1
        self.t2cof = 1.5 * cc1

        # Long-period coefficients; avoid dividing by zero at 180 degrees
        self.xlcof = _xlcof(j3oj2, sinio, cosio)
        self.aycof = -0.5 * j3oj2 * sinio
        self.delmo = (1.0 + eta * math.cos(mo)) ** 3
        self.sinmao = math.sin(mo)
        self.x7thm1 = 7.0 * cosio2 - 1.0

        self.d2 = self.d3 = self.d4 = 0.0
        self.t3cof = self.t4cof = self.t5cof = 0.0

        self.deep_space: Optional[DeepSpace] = None
        if self.is_deep_space:
            self.isimp = True
            self.deep_space = DeepSpace(
                epoch=elements.epoch.date - EPOCH_JAN0_00H_1950,
                ecco=ecco,
                argpo=argpo,
                inclo=inclo,
                nodeo=self.nodeo,
                mo=mo,
                no=no,
                gsto=elements.epoch.gmst(),
                mdot=self.mdot,
                nodedot=self.nodedot,
                argpdot=self.argpdot,
                xke=xke,
            )

        # Higher-order drag terms unless the simplified model applies
        if not self.isimp:
            cc1sq = cc1 * cc1
            self.d2 = 4.0 * ao * tsi * cc1sq
            temp = self.d2 * tsi * cc1 / 3.0
            self.d3 = (17.0 * ao + sfour) * temp
            self.d4 = 0.5 * temp * ao * tsi * (221.0 * ao + 31.0 * sfour) * cc1
            self.t3cof = self.d2 + 2.0 * cc1sq
            self.t4cof = 0.25 * (3.0 * self.d3 + cc1 * (12.0 * self.d2 + 10.0 * cc1sq))
            self.t5cof = 0.2 * (
                3.0 * self.d4
                + 12.0 * cc1 * self.d3
                + 6.0 * self.d2 * self.d2
                + 15.0 * cc1sq * (2.0 * self.d2 + cc1sq)
            )

        logger.debug(
            "Initialised %s for %s (period %.2f min, perigee %.1f km)",
            "SDP4" if self.is_deep_space else "SGP4",
            elements.name,
            self.period,
            perigee,
        )

    @property
    def epoch(self) -> Julian:
        return self.elements.epoch

    def position_at_time(self, when: Union[Julian, datetime]) -> EciState:
        """Propagate to an absolute UTC time.

        Args:
            when: Target time as a Julian date or datetime (naive = UTC).
        """
        julian = when if isinstance(when, Julian) else Julian.from_datetime(when)
        return self.position_at(julian.minutes_since(self.epoch))

    def position_at(self, minutes: float) -> EciState:
        """Propagate to a time offset from the element epoch.

        Args:
            minutes: Minutes since epoch (negative values go backwards).

        Returns:
            Inertial position (km) and velocity (km/s).

        Raises:
            DecayedOrbit: Mean motion, semi-latus rectum or radius became
                non-physical at this time.
            PropagationError: Mean or perturbed eccentricity left its valid
                range at this time.
        """
        grav = self.gravity
        xke = grav.xke
        j2 = grav.j2
        t = float(minutes)

        # Secular gravity and atmospheric drag
        xmdf = self.mo + self.mdot * t
        argpdf = self.argpo + self.argpdot * t
        nodedf = self.nodeo + self.nodedot * t
        argpm = argpdf
        mm = xmdf
        t2 = t * t
        nodem = nodedf + self.nodecf * t2
        tempa = 1.0 - self.cc1 * t
        tempe = self.bstar * self.cc4 * t
        templ = self.t2cof * t2

        if not self.isimp:
            delomg = self.omgcof * t
            delmtemp = 1.0 + self.eta * math.cos(xmdf)
            delm = self.xmcof * (delmtemp * delmtemp * delmtemp - self.delmo)
            temp = delomg + delm
            mm = xmdf + temp
            argpm = argpdf - temp
            t3 = t2 * t
            t4 = t3 * t
            tempa = tempa - self.d2 * t2 - self.d3 * t3 - self.d4 * t4
            tempe = tempe + self.bstar * self.cc5 * (math.sin(mm) - self.sinmao)
            templ = templ + self.t3cof * t3 + t4 * (self.t4cof + t * self.t5cof)

        nm = self.no
        em = self.ecco
        inclm = self.inclo
        if self.deep_space is not None:
            em, argpm, inclm, mm, nodem, nm = self.deep_space.secular(
                t, em, argpm, inclm, mm, nodem
            )

        if nm <= 0.0:
            raise DecayedOrbit(
                f"Mean motion {nm:.3e} fell below zero at {t:.3f} min", 2, t
            )

        am = (xke / nm) ** X2O3 * tempa * tempa
        nm = xke / am**1.5
        em = em - tempe

        if em >= 1.0 or em < -0.001:
            raise PropagationError(
                f"Mean eccentricity {em:.6f} outside [0, 1) at {t:.3f} min", 1, t
            )
        if em < 1.0e-6:
            em = 1.0e-6

        mm = mm + self.no * templ
        xlm = mm + argpm + nodem
        nodem = math.fmod(nodem, TWO_PI)
        argpm = math.fmod(argpm, TWO_PI)
        xlm = math.fmod(xlm, TWO_PI)
        mm = math.fmod(xlm - argpm - nodem, TWO_PI)

        sinim = math.sin(inclm)
        cosim = math.cos(inclm)

        # Lunar/solar periodics
        ep = em
        xincp = inclm
        argpp = argpm
        nodep = nodem
        mp = mm
        sinip = sinim
        cosip = cosim
        aycof = self.aycof
        xlcof = self.xlcof
        con41 = self.con41
        x1mth2 = self.x1mth2
        x7thm1 = self.x7thm1

        if self.deep_space is not None:
            ep, xincp, nodep, argpp, mp = self.deep_space.periodic(
                t, ep, xincp, nodep, argpp, mp
            )
            if xincp < 0.0:
                xincp = -xincp
                nodep = nodep + math.pi
                argpp = argpp - math.pi
            if ep < 0.0 or ep > 1.0:
                raise PropagationError(
                    f"Perturbed eccentricity {ep:.6f} outside [0, 1] at {t:.3f} min",
                    3,
                    t,
                )

            sinip = math.sin(xincp)
            cosip = math.cos(xincp)
            aycof = -0.5 * grav.j3oj2 * sinip
            xlcof = _xlcof(grav.j3oj2, sinip, cosip)

        # Long-period periodics
        axnl = ep * math.cos(argpp)
        temp = 1.0 / (am * (1.0 - ep * ep))
        aynl = ep * math.sin(argpp) + temp * aycof
        xl = mp + argpp + nodep + temp * xlcof * axnl

        u = math.fmod(xl - nodep, TWO_PI)
        eo1, converged = solve_kepler(
            u,
            axnl,
            aynl,
            self.config.kepler_tolerance,
            self.config.max_kepler_iterations,
        )
        if not converged:
            warnings.warn(
                f"Kepler's equation did not converge in "
                f"{self.config.max_kepler_iterations} iterations at {t:.3f} min",
                ConvergenceWarning,
                stacklevel=2,
            )
        sineo1 = math.sin(eo1)
        coseo1 = math.cos(eo1)

        # Short-period preliminary quantities
        ecose = axnl * coseo1 + aynl * sineo1
        esine = axnl * sineo1 - aynl * coseo1
        el2 = axnl * axnl + aynl * aynl
        pl = am * (1.0 - el2)
        if pl < 0.0:
            raise DecayedOrbit(
                f"Semi-latus rectum {pl:.3e} fell below zero at {t:.3f} min", 4, t
            )

        rl = am * (1.0 - ecose)
        rdotl = math.sqrt(am) * esine / rl
        rvdotl = math.sqrt(pl) / rl
        betal = math.sqrt(1.0 - el2)
        temp = esine / (1.0 + betal)
        sinu = am / rl * (sineo1 - aynl - axnl * temp)
        cosu = am / rl * (coseo1 - axnl + aynl * temp)
        su = math.atan2(sinu, cosu)
        sin2u = (cosu + cosu) * sinu
        cos2u = 1.0 - 2.0 * sinu * sinu
        temp = 1.0 / pl
        temp1 = 0.5 * j2 * temp
        temp2 = temp1 * temp

        if self.deep_space is not None:
            cosisq = cosip * cosip
            con41 = 3.0 * cosisq - 1.0
            x1mth2 = 1.0 - cosisq
            x7thm1 = 7.0 * cosisq - 1.0

        # Short-period periodics
        mrt = rl * (1.0 - 1.5 * temp2 * betal * con41) + 0.5 * temp1 * x1mth2 * cos2u
        su = su - 0.25 * temp2 * x7thm1 * sin2u
        xnode = nodep + 1.5 * temp2 * cosip * sin2u
        xinc = xincp + 1.5 * temp2 * cosip * sinip * cos2u
        mvt = rdotl - nm * temp1 * x1mth2 * sin2u / xke
        rvdot = rvdotl + nm * temp1 * (x1mth2 * cos2u + 1.5 * con41) / xke

        if mrt < 1.0:
            raise DecayedOrbit(
                f"Satellite decayed: radius {mrt * grav.radius:.1f} km "
                f"at {t:.3f} min",
                6,
                t,
            )

        # Orientation vectors (3-1-3 rotation by node, inclination, argument of latitude)
        sinsu = math.sin(su)
        cossu = math.cos(su)
        snod = math.sin(xnode)
        cnod = math.cos(xnode)
        sini = math.sin(xinc)
        cosi = math.cos(xinc)
        xmx = -snod * cosi
        xmy = cnod * cosi
        ux = xmx * sinsu + cnod * cossu
        uy = xmy * sinsu + snod * cossu
        uz = sini * sinsu
        vx = xmx * cossu - cnod * sinsu
        vy = xmy * cossu - snod * sinsu
        vz = sini * cossu

        mr = mrt * grav.radius
        vkmpersec = grav.radius * xke / 60.0
        return EciState(
            position=(mr * ux, mr * uy, mr * uz),
            velocity=(
                (mvt * ux + rvdot * vx) * vkmpersec,
                (mvt * uy + rvdot * vy) * vkmpersec,
                (mvt * uz + rvdot * vz) * vkmpersec,
            ),
            julian=self.epoch.add_minutes(t),
            minutes_since_epoch=t,
            converged=converged,
        )


def _xlcof(j3oj2: float, sinio: float, cosio: float) -> float:
    if abs(cosio + 1.0) > TEMP4:
        return -0.25 * j3oj2 * sinio * (3.0 + 5.0 * cosio) / (1.0 + cosio)
    return -0.25 * j3oj2 * sinio * (3.0 + 5.0 * cosio) / TEMP4
