from deepdrill.effects import EFFECT_COLORS, EffectTag, ParticleSystem


def test_every_tag_has_a_color():
    assert set(EFFECT_COLORS) == set(EffectTag)


def test_emit_spawns_colored_particles():
    particles = ParticleSystem(seed=0)
    particles(10, 20, EffectTag.SPARK)
    assert len(particles.particles) == 5
    for particle in particles.particles:
        assert particle.color == EFFECT_COLORS[EffectTag.SPARK]
        assert (particle.pos.x, particle.pos.y) == (10, 20)
        assert 30 <= particle.life <= 50


def test_particles_fall_and_expire():
    particles = ParticleSystem(seed=1)
    particles.emit(0, 0, EffectTag.EXPLOSION)
    start_vy = [p.vel.y for p in particles.particles]
    particles.update()
    assert all(p.vel.y > vy for p, vy in zip(particles.particles, start_vy))
    for _ in range(60):
        particles.update()
    assert particles.particles == []


def test_clear():
    particles = ParticleSystem(seed=2)
    particles.emit(0, 0, EffectTag.DIRT)
    particles.clear()
    assert particles.particles == []
