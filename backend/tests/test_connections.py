def test_ping_replies_pong(send, transport):
    send('anyone', 'ping')
    assert transport.sent == [('anyone', 'pong', {})]


def test_admin_join_replies_roster_genres_and_snapshot(send, transport):
    send('s1', 'team-join', {'name': 'A'})
    transport.clear()
    send('admin', 'admin-join')
    assert transport.events_for('admin') == ['teams', 'genres', 'tournament-state']
    assert transport.last_payload('admin', 'teams') == {'teams': ['A'], 'count': 1}
    assert transport.last_payload('admin', 'genres') == {
        'genres': ['Ex-Yu', 'Rep', 'Narodna', 'Pop', 'Turbo Folk'],
    }
    assert transport.last_payload('admin', 'tournament-state')['tournament']['phase'] == 'waiting'


def test_team_join_replies_and_broadcasts(send, transport):
    send('s1', 'team-join', {'name': 'A'})
    assert transport.sent == [('s1', 'joined', {'name': 'A'})]
    assert transport.broadcast_events() == ['teams', 'tournament-state']
    assert transport.broadcasts[0][1] == {'teams': ['A'], 'count': 1}


def test_name_collision_closes_prior_connection(send, session, transport):
    send('s1', 'team-join', {'name': 'A'})
    send('s2', 'team-join', {'name': 'A'})
    assert transport.closed == ['s1']
    assert session.registry.sid_for('A') == 's2'
    assert session.registry.count() == 1


def test_names_are_case_sensitive(send, session):
    send('s1', 'team-join', {'name': 'abba'})
    send('s2', 'team-join', {'name': 'ABBA'})
    assert session.registry.names() == ['abba', 'ABBA']


def test_disconnect_purges_after_grace(send, dispatcher, session, scheduler, clock, transport):
    send('s1', 'team-join', {'name': 'A'})
    dispatcher.connection_closed('s1')
    assert session.registry.names() == ['A']
    assert [delay for delay, _, _ in scheduler.pending] == [60]
    transport.clear()

    clock.advance(60)
    scheduler.run_all()
    assert session.registry.names() == []
    assert transport.broadcasts == [('teams', {'teams': [], 'count': 0})]


def test_rejoin_within_grace_keeps_team(send, dispatcher, session, scheduler, clock, transport):
    send('s1', 'team-join', {'name': 'A'})
    dispatcher.connection_closed('s1')
    clock.advance(5)
    send('s2', 'team-join', {'name': 'A'})
    # The old socket is already gone; nothing to close
    assert transport.closed == []
    clock.advance(60)
    scheduler.run_all()
    assert session.registry.sid_for('A') == 's2'
    assert 'kicked' not in transport.events_for('s2')


def test_rejoin_after_purge_is_a_fresh_join(send, dispatcher, session, scheduler, clock):
    send('s1', 'team-join', {'name': 'A'})
    dispatcher.connection_closed('s1')
    clock.advance(61)
    scheduler.run_all()
    send('s2', 'team-join', {'name': 'A'})
    assert session.registry.sid_for('A') == 's2'


def test_disconnect_of_unknown_connection_schedules_nothing(dispatcher, scheduler):
    dispatcher.connection_closed('nobody')
    assert scheduler.pending == []


def test_admin_disconnect_clears_admin(send, dispatcher, session, transport):
    send('admin', 'admin-join')
    dispatcher.connection_closed('admin')
    assert session.registry.admin_sid is None
    transport.clear()
    send('admin', 'reset-tournament')
    assert transport.broadcasts == []


def test_kick_removes_team_immediately(send, session, transport):
    send('admin', 'admin-join')
    send('s1', 'team-join', {'name': 'A'})
    transport.clear()
    send('admin', 'kick-team', {'name': 'A'})
    assert transport.sent == [('s1', 'kicked', {})]
    assert transport.closed == ['s1']
    assert session.registry.names() == []
    assert transport.broadcasts == [('teams', {'teams': [], 'count': 0})]


def test_kick_requires_admin_and_known_team(send, session, transport):
    send('s1', 'team-join', {'name': 'A'})
    send('s2', 'kick-team', {'name': 'A'})
    assert session.registry.names() == ['A']
    send('admin', 'admin-join')
    transport.clear()
    send('admin', 'kick-team', {'name': 'Z'})
    assert transport.sent == [] and transport.broadcasts == []


def test_kicked_during_grace_cancels_purge(send, dispatcher, session, scheduler, clock):
    send('admin', 'admin-join')
    send('s1', 'team-join', {'name': 'A'})
    dispatcher.connection_closed('s1')
    send('admin', 'kick-team', {'name': 'A'})
    send('s2', 'team-join', {'name': 'A'})
    clock.advance(120)
    scheduler.run_all()
    assert session.registry.sid_for('A') == 's2'


def test_broken_transport_does_not_break_dispatch(session, dispatcher):
    from buzzer.messages import TeamJoin
    from buzzer.transport import SocketIOTransport

    class Exploding:
        def emit(self, *args, **kwargs):
            raise RuntimeError('socket gone')

    session.transport = SocketIOTransport(Exploding())
    session.notifier.transport = session.transport
    dispatcher.dispatch('s1', TeamJoin(name='A'))
    assert session.registry.names() == ['A']
