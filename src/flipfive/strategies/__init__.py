from flipfive.strategies.base import NoPlanError, Strategy
from flipfive.strategies.chasing_lights import ChasingLights
from flipfive.strategies.linear_algebra_minweight import LinearAlgebraMinWeight
